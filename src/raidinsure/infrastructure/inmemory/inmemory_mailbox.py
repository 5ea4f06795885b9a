from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from raidinsure.domain.models.insurance import MessageContent
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.repositories import MailGateway


@dataclass
class DeliveredMail:
    player_id: str
    counterparty_id: str
    message: MessageContent
    items: List[ItemSnapshot] = field(default_factory=list)
    scheduled_time: Optional[float] = None


class InMemoryMailbox(MailGateway):
    _HISTORY_MAX = 1000

    def __init__(self) -> None:
        self._delivered: List[DeliveredMail] = []

    def deliver(
        self,
        player_id: str,
        counterparty_id: str,
        message: MessageContent,
        items: Sequence[ItemSnapshot] = (),
        scheduled_time: float | None = None,
    ) -> None:
        self._delivered.append(
            DeliveredMail(
                player_id=player_id,
                counterparty_id=counterparty_id,
                message=message,
                items=list(items),
                scheduled_time=scheduled_time,
            )
        )
        if len(self._delivered) > self._HISTORY_MAX:
            del self._delivered[:-self._HISTORY_MAX]

    def list_for_player(self, player_id: str) -> List[DeliveredMail]:
        return [row for row in self._delivered if row.player_id == player_id]
