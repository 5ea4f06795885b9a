from __future__ import annotations

from raidinsure.domain.models.counterparty import PRAPOR_ID, THERAPIST_ID


ONE_HOUR_AS_SECONDS = 3600

DEFAULT_INSURANCE_MULTIPLIER = 0.3

INSURANCE_MULTIPLIERS = {
    PRAPOR_ID: 0.16,
    THERAPIST_ID: 0.25,
}

POCKET_SLOTS = (
    "pocket1",
    "pocket2",
    "pocket3",
    "pocket4",
)

BLACKLISTED_EQUIPMENT_SLOTS = (
    "SecuredContainer",
    "SpecialSlot1",
    "SpecialSlot2",
    "SpecialSlot3",
)

HIGH_LETHALITY_LOCATION = "laboratory"

RETURN_TIME_OVERRIDE_SECONDS = 0

AIRDROP_TYPE_WEIGHTINGS = {
    "mixed": 5,
    "weaponArmor": 4,
    "foodMedical": 1,
    "barter": 1,
}

AIRDROP_LOOT = {
    "mixed": {
        "presetCount": {"min": 0, "max": 3},
        "itemCount": {"min": 12, "max": 35},
        "weaponCrateCount": {"min": 0, "max": 2},
        "itemBlacklist": [],
        "itemTypeWhitelist": [],
        "itemLimits": {},
        "itemStackLimits": {},
        "armorLevelWhitelist": [0, 3, 4, 5, 6],
    },
    "weaponArmor": {
        "presetCount": {"min": 6, "max": 8},
        "itemCount": {"min": 4, "max": 7},
        "weaponCrateCount": {"min": 1, "max": 2},
        "itemBlacklist": [],
        "itemTypeWhitelist": ["weapon", "armor", "ammo"],
        "itemLimits": {},
        "itemStackLimits": {"ammo": {"min": 30, "max": 60}},
        "armorLevelWhitelist": [3, 4, 5, 6],
    },
    "foodMedical": {
        "presetCount": {"min": 0, "max": 0},
        "itemCount": {"min": 25, "max": 45},
        "weaponCrateCount": {"min": 0, "max": 0},
        "itemBlacklist": [],
        "itemTypeWhitelist": ["food", "medical"],
        "itemLimits": {},
        "itemStackLimits": {},
        "armorLevelWhitelist": [],
    },
    "barter": {
        "presetCount": {"min": 0, "max": 0},
        "itemCount": {"min": 20, "max": 35},
        "weaponCrateCount": {"min": 0, "max": 0},
        "itemBlacklist": [],
        "itemTypeWhitelist": ["barter"],
        "itemLimits": {"59faff1d86f7746c51718c9c": 2},
        "itemStackLimits": {},
        "armorLevelWhitelist": [],
    },
}

# Template id and loot category of every item the stock loot generator can drop
AIRDROP_LOOT_POOL = (
    ("5755356824597772cb798962", "medical"),
    ("544fb45d4bdc2dee738b4568", "medical"),
    ("57347d7224597744596b4e72", "food"),
    ("5734773724597737fd047c14", "food"),
    ("59e3577886f774176a362503", "food"),
    ("5c0e874186f7745dc7616606", "armor"),
    ("5448be9a4bdc2dfd2f8b456a", "weapon"),
    ("54527a984bdc2d4e668b4567", "ammo"),
    ("59faff1d86f7746c51718c9c", "barter"),
    ("5d235b4d86f7742e017bc88a", "barter"),
    ("5734758f24597738025ee253", "barter"),
)
