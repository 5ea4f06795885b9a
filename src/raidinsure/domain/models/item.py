from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


NEUTRAL_HOLDING_SLOT = "hideout"


@dataclass
class Repairable:
    durability: float
    max_durability: float


@dataclass
class FaceShield:
    hits: int


@dataclass
class ItemUpd:
    repairable: Optional[Repairable] = None
    face_shield: Optional[FaceShield] = None
    spawned_in_session: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        if self.repairable is not None:
            payload["Repairable"] = {
                "Durability": self.repairable.durability,
                "MaxDurability": self.repairable.max_durability,
            }
        if self.face_shield is not None:
            payload["FaceShield"] = {"Hits": self.face_shield.hits}
        if self.spawned_in_session is not None:
            payload["SpawnedInSession"] = bool(self.spawned_in_session)
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any] | None) -> "ItemUpd":
        raw = dict(payload or {})
        repairable = None
        face_shield = None
        raw_repairable = raw.pop("Repairable", None)
        if isinstance(raw_repairable, dict):
            repairable = Repairable(
                durability=raw_repairable.get("Durability", 0),
                max_durability=raw_repairable.get("MaxDurability", 0),
            )
        raw_face_shield = raw.pop("FaceShield", None)
        if isinstance(raw_face_shield, dict):
            face_shield = FaceShield(hits=int(raw_face_shield.get("Hits", 0) or 0))
        spawned = raw.pop("SpawnedInSession", None)
        return cls(
            repairable=repairable,
            face_shield=face_shield,
            spawned_in_session=None if spawned is None else bool(spawned),
            extra=raw,
        )


@dataclass
class ItemSnapshot:
    """An item as it sat in an inventory at one point in time."""

    id: str
    template_id: str
    parent_id: Optional[str] = None
    slot_id: Optional[str] = None
    location: Optional[Any] = None
    upd: Optional[ItemUpd] = None

    def clone(self) -> "ItemSnapshot":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"_id": self.id, "_tpl": self.template_id}
        if self.parent_id is not None:
            payload["parentId"] = self.parent_id
        if self.slot_id is not None:
            payload["slotId"] = self.slot_id
        if self.location is not None:
            payload["location"] = copy.deepcopy(self.location)
        if self.upd is not None:
            payload["upd"] = self.upd.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ItemSnapshot":
        upd = payload.get("upd")
        return cls(
            id=str(payload["_id"]),
            template_id=str(payload.get("_tpl", "")),
            parent_id=payload.get("parentId"),
            slot_id=payload.get("slotId"),
            location=copy.deepcopy(payload.get("location")),
            upd=ItemUpd.from_dict(upd) if isinstance(upd, dict) else None,
        )


@dataclass(frozen=True)
class ClientInsuredItemData:
    """Wear state the client reported for an insured item when the raid ended."""

    id: str
    durability: Optional[float] = None
    max_durability: Optional[float] = None
    hits: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ClientInsuredItemData":
        return cls(
            id=str(payload["id"]),
            durability=payload.get("durability"),
            max_durability=payload.get("maxDurability"),
            hits=payload.get("hits"),
        )
