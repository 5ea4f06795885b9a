from __future__ import annotations

from typing import Iterable, List, Optional

from raidinsure.application.services.insurance_tables import POCKET_SLOTS
from raidinsure.domain.models.item import (
    NEUTRAL_HOLDING_SLOT,
    ClientInsuredItemData,
    FaceShield,
    ItemSnapshot,
    ItemUpd,
    Repairable,
)


def _first_set(*values):
    return next((value for value in values if value is not None), None)


class ReturnItemNormalizer:
    """Turn a pre-raid item into the copy a counterparty mails back.

    The input snapshot is never mutated. Slot and location handling is
    idempotent, so normalizing an already normalized item changes nothing.
    """

    def __init__(self, pocket_slots: Iterable[str] = POCKET_SLOTS) -> None:
        self.pocket_slots = frozenset(pocket_slots)

    def normalize(
        self,
        inventory_root_id: str,
        pre_session_item: ItemSnapshot,
        client_data: Optional[ClientInsuredItemData] = None,
    ) -> ItemSnapshot:
        item = pre_session_item.clone()
        if item.upd is None:
            item.upd = ItemUpd()

        self._update_slot(inventory_root_id, item)

        if item.slot_id == NEUTRAL_HOLDING_SLOT:
            item.location = None

        if item.upd.spawned_in_session is not None:
            item.upd.spawned_in_session = False

        if client_data is not None:
            self._merge_wear_state(item.upd, client_data)

        return item

    def _update_slot(self, inventory_root_id: str, item: ItemSnapshot) -> None:
        # Some pockets lose their contents on death, some don't
        if not item.slot_id or item.slot_id in self.pocket_slots:
            item.slot_id = NEUTRAL_HOLDING_SLOT

        if inventory_root_id and item.parent_id == inventory_root_id:
            item.slot_id = NEUTRAL_HOLDING_SLOT

    @staticmethod
    def _merge_wear_state(upd: ItemUpd, client_data: ClientInsuredItemData) -> None:
        # Zero is a real reading: a fully broken item or a visor with no hits
        if client_data.durability is not None:
            if upd.repairable is None:
                upd.repairable = Repairable(
                    durability=client_data.durability,
                    max_durability=_first_set(client_data.max_durability, client_data.durability),
                )
            else:
                upd.repairable.durability = client_data.durability
                upd.repairable.max_durability = _first_set(client_data.max_durability, upd.repairable.max_durability)

        if client_data.hits is not None:
            if upd.face_shield is None:
                upd.face_shield = FaceShield(hits=int(client_data.hits))
            else:
                upd.face_shield.hits = int(client_data.hits)

    @staticmethod
    def normalize_root_items(items: List[ItemSnapshot]) -> List[ItemSnapshot]:
        """Items whose parent is not in the same batch become root items in the holding slot."""
        batch_ids = {item.id for item in items}
        for item in items:
            if item.parent_id not in batch_ids:
                item.slot_id = NEUTRAL_HOLDING_SLOT
                item.location = None
        return items
