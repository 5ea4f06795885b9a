from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from raidinsure.domain.models.insurance import InsuranceRecord
from raidinsure.domain.models.item import ItemSnapshot


INSURANCE_RETURN_TIME_BONUS = "InsuranceReturnTime"


@dataclass(frozen=True)
class InsuredItemReference:
    item_id: str
    counterparty_id: str


@dataclass(frozen=True)
class ProfileBonus:
    type: str
    value: float = 0.0


@dataclass
class PlayerProfile:
    id: str
    inventory_root_id: str
    items: List[ItemSnapshot] = field(default_factory=list)
    insured_items: List[InsuredItemReference] = field(default_factory=list)
    bonuses: List[ProfileBonus] = field(default_factory=list)
    counterparty_loyalty: Dict[str, int] = field(default_factory=dict)
    pending_returns: List[InsuranceRecord] = field(default_factory=list)

    def find_bonus(self, bonus_type: str) -> Optional[ProfileBonus]:
        return next((bonus for bonus in self.bonuses if bonus.type == bonus_type), None)

    def loyalty_level_with(self, counterparty_id: str) -> int:
        return max(1, int(self.counterparty_loyalty.get(counterparty_id, 1) or 1))

    def remove_insured_item(self, item_id: str) -> None:
        self.insured_items = [ref for ref in self.insured_items if ref.item_id != item_id]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "inventoryRootId": self.inventory_root_id,
            "items": [item.to_dict() for item in self.items],
            "insuredItems": [{"itemId": ref.item_id, "tid": ref.counterparty_id} for ref in self.insured_items],
            "bonuses": [{"type": bonus.type, "value": bonus.value} for bonus in self.bonuses],
            "counterpartyLoyalty": dict(self.counterparty_loyalty),
            "insurance": [record.to_dict() for record in self.pending_returns],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "PlayerProfile":
        return cls(
            id=str(payload["id"]),
            inventory_root_id=str(payload.get("inventoryRootId", "")),
            items=[ItemSnapshot.from_dict(row) for row in payload.get("items", [])],
            insured_items=[
                InsuredItemReference(item_id=str(row["itemId"]), counterparty_id=str(row["tid"]))
                for row in payload.get("insuredItems", [])
            ],
            bonuses=[
                ProfileBonus(type=str(row.get("type", "")), value=float(row.get("value", 0) or 0))
                for row in payload.get("bonuses", [])
            ],
            counterparty_loyalty={
                str(key): int(value) for key, value in dict(payload.get("counterpartyLoyalty") or {}).items()
            },
            pending_returns=[InsuranceRecord.from_dict(row) for row in payload.get("insurance", [])],
        )
