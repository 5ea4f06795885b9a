from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from raidinsure.domain.models.item import ItemSnapshot


class MessageType(IntEnum):
    USER_MESSAGE = 1
    NPC_TRADER = 2
    AUCTION_MESSAGE = 3
    FLEAMARKET_MESSAGE = 4
    ADMIN_MESSAGE = 5
    GROUP_CHAT_MESSAGE = 6
    SYSTEM_MESSAGE = 7
    INSURANCE_RETURN = 8
    GLOBAL_CHAT = 9
    QUEST_START = 10
    QUEST_FAIL = 11
    QUEST_SUCCESS = 12
    MESSAGE_WITH_ITEMS = 13
    INITIAL_SUPPORT = 14


@dataclass
class MessageContent:
    template_id: str
    type: MessageType
    max_storage_time: Optional[int] = None
    text: Optional[str] = None
    profile_change_events: Optional[List[Any]] = None
    system_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "templateId": self.template_id,
            "type": int(self.type),
        }
        if self.max_storage_time is not None:
            payload["maxStorageTime"] = int(self.max_storage_time)
        if self.text is not None:
            payload["text"] = self.text
        if self.profile_change_events is not None:
            payload["profileChangeEvents"] = list(self.profile_change_events)
        if self.system_data:
            payload["systemData"] = dict(self.system_data)
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "MessageContent":
        events = payload.get("profileChangeEvents")
        return cls(
            template_id=str(payload["templateId"]),
            type=MessageType(int(payload["type"])),
            max_storage_time=payload.get("maxStorageTime"),
            text=payload.get("text"),
            profile_change_events=list(events) if isinstance(events, list) else None,
            system_data=dict(payload.get("systemData") or {}),
        )


@dataclass
class InsuranceRecord:
    """Items a counterparty will mail back to the player at ``scheduled_time``."""

    counterparty_id: str
    scheduled_time: float
    message_content: MessageContent
    items: List[ItemSnapshot] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "traderId": self.counterparty_id,
            "scheduledTime": self.scheduled_time,
            "messageContent": self.message_content.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "InsuranceRecord":
        return cls(
            counterparty_id=str(payload["traderId"]),
            scheduled_time=payload["scheduledTime"],
            message_content=MessageContent.from_dict(payload["messageContent"]),
            items=[ItemSnapshot.from_dict(row) for row in payload.get("items", [])],
        )
