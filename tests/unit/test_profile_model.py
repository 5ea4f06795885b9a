import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from raidinsure.domain.models.counterparty import Counterparty, LoyaltyLevel
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile


class PlayerProfileTests(unittest.TestCase):
    def _payload(self) -> dict:
        return {
            "id": "pmc1",
            "inventoryRootId": "inv",
            "items": [
                {
                    "_id": "armor",
                    "_tpl": "tpl_armor",
                    "parentId": "inv",
                    "slotId": "ArmorVest",
                    "upd": {"Repairable": {"Durability": 40, "MaxDurability": 80}, "StackObjectsCount": 1},
                }
            ],
            "insuredItems": [{"itemId": "armor", "tid": "trader_x"}],
            "bonuses": [{"type": "InsuranceReturnTime", "value": -15}],
            "counterpartyLoyalty": {"trader_x": 3},
        }

    def test_from_dict_reads_insured_references_and_wear_state(self) -> None:
        profile = PlayerProfile.from_dict(self._payload())

        self.assertEqual("trader_x", profile.insured_items[0].counterparty_id)
        self.assertEqual(40, profile.items[0].upd.repairable.durability)
        self.assertEqual({"StackObjectsCount": 1}, profile.items[0].upd.extra)
        self.assertEqual(-15, profile.find_bonus("InsuranceReturnTime").value)
        self.assertEqual([], profile.pending_returns)

    def test_to_dict_keeps_unknown_upd_keys(self) -> None:
        payload = PlayerProfile.from_dict(self._payload()).to_dict()
        self.assertEqual(1, payload["items"][0]["upd"]["StackObjectsCount"])
        self.assertEqual([{"itemId": "armor", "tid": "trader_x"}], payload["insuredItems"])

    def test_loyalty_level_defaults_to_one(self) -> None:
        profile = PlayerProfile.from_dict(self._payload())
        self.assertEqual(3, profile.loyalty_level_with("trader_x"))
        self.assertEqual(1, profile.loyalty_level_with("unknown"))

    def test_remove_insured_item_drops_only_matching_reference(self) -> None:
        profile = PlayerProfile.from_dict(self._payload())
        profile.remove_insured_item("other")
        self.assertEqual(1, len(profile.insured_items))
        profile.remove_insured_item("armor")
        self.assertEqual([], profile.insured_items)

    def test_clone_is_independent(self) -> None:
        item = ItemSnapshot.from_dict(self._payload()["items"][0])
        copy = item.clone()
        copy.upd.repairable.durability = 1
        self.assertEqual(40, item.upd.repairable.durability)


class CounterpartyLoyaltyTests(unittest.TestCase):
    def test_loyalty_level_is_clamped_to_known_levels(self) -> None:
        counterparty = Counterparty(
            id="trader_x",
            name="Trader X",
            loyalty_levels=[LoyaltyLevel(min_level=1, insurance_price_coef=0), LoyaltyLevel(min_level=10, insurance_price_coef=8)],
        )
        self.assertEqual(0, counterparty.loyalty_level(1).insurance_price_coef)
        self.assertEqual(8, counterparty.loyalty_level(2).insurance_price_coef)
        self.assertEqual(8, counterparty.loyalty_level(9).insurance_price_coef)


if __name__ == "__main__":
    unittest.main()
