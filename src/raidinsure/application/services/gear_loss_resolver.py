from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from raidinsure.application.dtos import ReturnCandidate
from raidinsure.application.services.return_item_normalizer import ReturnItemNormalizer
from raidinsure.domain.models.item import ClientInsuredItemData, ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile


def create_item_hash_table(items: Iterable[ItemSnapshot]) -> Dict[str, ItemSnapshot]:
    return {item.id: item for item in items}


class GearLossResolver:
    """Decide which insured items a player lost in a raid.

    Pure with respect to the registry and the profile: it only reads the
    profile's insured item references and returns normalized candidates.
    """

    def __init__(self, blacklisted_slots: Iterable[str], normalizer: ReturnItemNormalizer | None = None) -> None:
        self.blacklisted_slots = frozenset(blacklisted_slots)
        self.normalizer = normalizer or ReturnItemNormalizer()
        self._logger = logging.getLogger(__name__)

    def resolve(
        self,
        profile: PlayerProfile,
        pre_session_items: Sequence[ItemSnapshot],
        post_session_items: Sequence[ItemSnapshot],
        client_insurance: Sequence[ClientInsuredItemData] = (),
        player_died: bool = False,
        session_id: str | None = None,
    ) -> List[ReturnCandidate]:
        pre_session = create_item_hash_table(pre_session_items)
        post_session = create_item_hash_table(post_session_items)
        client_data = {row.id: row for row in client_insurance}
        session = session_id or profile.id

        candidates: List[ReturnCandidate] = []
        for reference in profile.insured_items:
            pre_session_item = pre_session.get(reference.item_id)
            if pre_session_item is None:
                self._logger.debug(
                    "Insured item was not carried into the raid",
                    extra={"item_id": reference.item_id, "session_id": session},
                )
                continue

            if pre_session_item.slot_id in self.blacklisted_slots:
                continue

            # Catches both a death with the item equipped and a survivor who dropped it
            if reference.item_id in post_session and not player_died:
                continue

            candidates.append(
                ReturnCandidate(
                    profile=profile,
                    return_item=self.normalizer.normalize(
                        profile.inventory_root_id,
                        pre_session_item,
                        client_data.get(reference.item_id),
                    ),
                    counterparty_id=reference.counterparty_id,
                    session_id=session,
                )
            )
        return candidates
