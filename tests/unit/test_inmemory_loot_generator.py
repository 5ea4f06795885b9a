import random
import sys
from collections import Counter
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from raidinsure.domain.models.airdrop import LootRequest, MinMax
from raidinsure.infrastructure.inmemory.inmemory_loot_generator import InMemoryLootGenerator


POOL = (
    ("tpl_bandage", "medical"),
    ("tpl_crackers", "food"),
    ("tpl_bolts", "barter"),
    ("tpl_rounds", "ammo"),
)


class InMemoryLootGeneratorTests(unittest.TestCase):
    def _generator(self, seed: int = 7) -> InMemoryLootGenerator:
        return InMemoryLootGenerator(POOL, rng=random.Random(seed))

    def test_item_count_stays_inside_bounds(self) -> None:
        request = LootRequest(item_count=MinMax(min=3, max=6))
        for seed in range(30):
            loot = self._generator(seed).create_random_loot(request)
            self.assertTrue(3 <= len(loot) <= 6, len(loot))

    def test_reversed_bounds_are_accepted(self) -> None:
        loot = self._generator().create_random_loot(LootRequest(item_count=MinMax(min=5, max=2)))
        self.assertTrue(2 <= len(loot) <= 5)

    def test_whitelist_restricts_categories(self) -> None:
        request = LootRequest(item_count=MinMax(min=20, max=20), item_type_whitelist=["food", "medical"])

        loot = self._generator().create_random_loot(request)

        self.assertEqual(20, len(loot))
        self.assertTrue(all(item.template_id in {"tpl_bandage", "tpl_crackers"} for item in loot))

    def test_blacklisted_templates_never_drop(self) -> None:
        request = LootRequest(item_count=MinMax(min=30, max=30), item_blacklist=["tpl_bolts", "tpl_rounds"])

        loot = self._generator().create_random_loot(request)

        self.assertEqual(30, len(loot))
        self.assertNotIn("tpl_bolts", {item.template_id for item in loot})
        self.assertNotIn("tpl_rounds", {item.template_id for item in loot})

    def test_no_candidates_logs_and_returns_nothing(self) -> None:
        request = LootRequest(item_count=MinMax(min=5, max=5), item_type_whitelist=["weapon"])

        with self.assertLogs("raidinsure.infrastructure.inmemory.inmemory_loot_generator", level="WARNING"):
            loot = self._generator().create_random_loot(request)

        self.assertEqual([], loot)

    def test_item_limits_cap_templates_and_categories(self) -> None:
        request = LootRequest(
            item_count=MinMax(min=40, max=40),
            item_limits={"tpl_bolts": 1, "medical": 2},
        )

        counts = Counter(item.template_id for item in self._generator().create_random_loot(request))

        self.assertLessEqual(counts["tpl_bolts"], 1)
        self.assertLessEqual(counts["tpl_bandage"], 2)

    def test_draws_stop_when_every_candidate_is_capped(self) -> None:
        request = LootRequest(
            item_count=MinMax(min=10, max=10),
            item_type_whitelist=["barter"],
            item_limits={"tpl_bolts": 3},
        )

        loot = self._generator().create_random_loot(request)

        self.assertEqual(3, len(loot))

    def test_stack_limits_set_stack_count(self) -> None:
        request = LootRequest(
            item_count=MinMax(min=10, max=10),
            item_type_whitelist=["ammo", "barter"],
            item_stack_limits={"ammo": MinMax(min=30, max=60)},
        )

        loot = self._generator().create_random_loot(request)

        for item in loot:
            if item.template_id == "tpl_rounds":
                self.assertTrue(30 <= item.upd.extra["StackObjectsCount"] <= 60)
            else:
                self.assertIsNone(item.upd)

    def test_item_ids_are_unique_hex(self) -> None:
        loot = self._generator().create_random_loot(LootRequest(item_count=MinMax(min=25, max=25)))

        ids = [item.id for item in loot]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertTrue(all(len(item_id) == 24 and int(item_id, 16) >= 0 for item_id in ids))

    def test_same_seed_repeats_loot(self) -> None:
        request = LootRequest(item_count=MinMax(min=5, max=15), item_stack_limits={"ammo": MinMax(min=1, max=9)})

        first = [item.to_dict() for item in self._generator(42).create_random_loot(request)]
        second = [item.to_dict() for item in self._generator(42).create_random_loot(request)]

        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
