import logging
from typing import Sequence

import httpx

from raidinsure.domain.models.insurance import MessageContent
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.repositories import MailGateway
from raidinsure.infrastructure.resilient_http import post_json_with_retry


class HttpMailGateway(MailGateway):
    """Posts composed trader messages to the dialogue service that owns player mailboxes."""

    SEND_PATH = "/mail/send"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        retries: int = 2,
        backoff_seconds: float = 0.2,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._retries = retries
        self._backoff_seconds = backoff_seconds
        self.client = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def deliver(
        self,
        player_id: str,
        counterparty_id: str,
        message: MessageContent,
        items: Sequence[ItemSnapshot] = (),
        scheduled_time: float | None = None,
    ) -> None:
        body = {
            "sessionId": player_id,
            "traderId": counterparty_id,
            "messageType": int(message.type),
            "templateId": message.template_id,
            "message": message.to_dict(),
            "items": [item.to_dict() for item in items],
        }
        if scheduled_time is not None:
            body["scheduledTime"] = scheduled_time
        post_json_with_retry(
            self.client,
            self.SEND_PATH,
            payload=body,
            headers={"Accept": "application/json"},
            retries=self._retries,
            backoff_seconds=self._backoff_seconds,
        )
        self._logger.debug(
            "Mail delivered",
            extra={"player_id": player_id, "counterparty_id": counterparty_id, "template_id": message.template_id},
        )

    def close(self) -> None:
        self.client.close()
