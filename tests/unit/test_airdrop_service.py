import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from raidinsure.application.config import AirdropConfig
from raidinsure.application.services.airdrop_service import AirdropService
from raidinsure.application.services.weighted_random import WeightedRandomSelector
from raidinsure.domain.models.airdrop import AirdropType, LootRequest, MinMax
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.repositories import LootGenerator


class _FixedRoll:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class _RecordingLootGenerator(LootGenerator):
    def __init__(self) -> None:
        self.requests = []

    def create_random_loot(self, request: LootRequest):
        self.requests.append(request)
        return [ItemSnapshot(id="loot1", template_id="tpl_loot")]


class WeightedRandomSelectorTests(unittest.TestCase):
    def test_roll_lands_in_cumulative_band(self) -> None:
        weights = {"a": 1, "b": 3}
        self.assertEqual("a", WeightedRandomSelector(_FixedRoll(0.1)).choose(weights))
        self.assertEqual("b", WeightedRandomSelector(_FixedRoll(0.5)).choose(weights))
        self.assertEqual("b", WeightedRandomSelector(_FixedRoll(0.999)).choose(weights))

    def test_zero_weights_are_never_chosen(self) -> None:
        weights = {"never": 0, "always": 5}
        for roll in (0.0, 0.3, 0.9):
            self.assertEqual("always", WeightedRandomSelector(_FixedRoll(roll)).choose(weights))

    def test_no_positive_weight_raises(self) -> None:
        with self.assertRaises(ValueError):
            WeightedRandomSelector(_FixedRoll(0.5)).choose({})
        with self.assertRaises(ValueError):
            WeightedRandomSelector(_FixedRoll(0.5)).choose({"a": 0, "b": -2})


class AirdropServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.mixed_request = LootRequest(item_count=MinMax(min=5, max=10))
        self.barter_request = LootRequest(item_count=MinMax(min=2, max=4))
        self.generator = _RecordingLootGenerator()

    def _service(self, weights, loot, roll: float) -> AirdropService:
        config = AirdropConfig(airdrop_type_weightings=weights, loot=loot)
        return AirdropService(config, self.generator, WeightedRandomSelector(_FixedRoll(roll)))

    def test_choose_airdrop_type_uses_weightings(self) -> None:
        service = self._service({"mixed": 1, "barter": 3}, {}, roll=0.6)
        self.assertEqual(AirdropType.BARTER, service.choose_airdrop_type())

    def test_loot_request_for_known_type(self) -> None:
        service = self._service({"barter": 1}, {"barter": self.barter_request}, roll=0.1)
        self.assertIs(self.barter_request, service.loot_request_for(AirdropType.BARTER))

    def test_missing_loot_config_falls_back_to_mixed(self) -> None:
        service = self._service({"foodMedical": 1}, {"mixed": self.mixed_request}, roll=0.1)

        with self.assertLogs("raidinsure.application.services.airdrop_service", level="ERROR"):
            result = service.get_airdrop_loot()

        self.assertEqual(AirdropType.FOOD_MEDICAL, result.drop_type)
        self.assertEqual([self.mixed_request], self.generator.requests)

    def test_get_airdrop_loot_returns_generated_items(self) -> None:
        service = self._service({"barter": 1}, {"barter": self.barter_request}, roll=0.1)

        result = service.get_airdrop_loot()

        self.assertEqual(AirdropType.BARTER, result.drop_type)
        self.assertEqual(["loot1"], [item.id for item in result.loot])
        self.assertEqual([self.barter_request], self.generator.requests)

    def test_explicit_type_skips_weighted_choice(self) -> None:
        service = self._service({"mixed": 1}, {"mixed": self.mixed_request, "barter": self.barter_request}, roll=0.1)

        result = service.get_airdrop_loot(AirdropType.BARTER)

        self.assertEqual(AirdropType.BARTER, result.drop_type)
        self.assertEqual([self.barter_request], self.generator.requests)


if __name__ == "__main__":
    unittest.main()
