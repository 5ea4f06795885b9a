from __future__ import annotations

import logging
import random
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from raidinsure.application.services.insurance_tables import AIRDROP_LOOT_POOL
from raidinsure.domain.models.airdrop import LootRequest, MinMax
from raidinsure.domain.models.item import ItemSnapshot, ItemUpd
from raidinsure.domain.repositories import LootGenerator


PoolEntry = Tuple[str, str]


class InMemoryLootGenerator(LootGenerator):
    """Draws loose airdrop items from a fixed (template id, category) pool.

    Honours the request's item count, blacklist, category whitelist, per-item
    limits and stack limits. Preset counts, weapon crates and armour levels
    need full item presets and are not applied here.
    """

    def __init__(self, pool: Sequence[PoolEntry] = AIRDROP_LOOT_POOL, rng: Optional[random.Random] = None) -> None:
        self.pool = tuple(pool)
        self.rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def _candidates(self, request: LootRequest) -> List[PoolEntry]:
        blacklist = set(request.item_blacklist)
        whitelist = set(request.item_type_whitelist)
        return [
            (template_id, category)
            for template_id, category in self.pool
            if template_id not in blacklist and (not whitelist or category in whitelist)
        ]

    @staticmethod
    def _limit_for(limits: dict, template_id: str, category: str):
        if template_id in limits:
            return limits[template_id]
        return limits.get(category)

    def _roll(self, bounds: MinMax) -> int:
        low, high = sorted((int(bounds.min), int(bounds.max)))
        return self.rng.randint(max(0, low), max(0, high))

    def create_random_loot(self, request: LootRequest) -> List[ItemSnapshot]:
        candidates = self._candidates(request)
        if not candidates:
            self._logger.warning(
                "No loot candidates left after filtering",
                extra={"whitelist": list(request.item_type_whitelist), "blacklist_size": len(request.item_blacklist)},
            )
            return []

        wanted = self._roll(request.item_count)
        drawn: Counter = Counter()
        loot: List[ItemSnapshot] = []
        for _ in range(wanted):
            open_candidates = [
                entry
                for entry in candidates
                if self._limit_for(request.item_limits, *entry) is None
                or drawn[entry[0]] < int(self._limit_for(request.item_limits, *entry))
            ]
            if not open_candidates:
                break
            template_id, category = self.rng.choice(open_candidates)
            drawn[template_id] += 1

            upd = None
            stack = self._limit_for(request.item_stack_limits, template_id, category)
            if stack is not None:
                upd = ItemUpd(extra={"StackObjectsCount": self._roll(stack)})
            loot.append(ItemSnapshot(id=f"{self.rng.getrandbits(96):024x}", template_id=template_id, upd=upd))

        self._logger.debug("Generated airdrop loot", extra={"requested": wanted, "generated": len(loot)})
        return loot
