from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from raidinsure.domain.models.item import ItemSnapshot


class AirdropType(str, Enum):
    MIXED = "mixed"
    WEAPON_ARMOR = "weaponArmor"
    FOOD_MEDICAL = "foodMedical"
    BARTER = "barter"


@dataclass(frozen=True)
class MinMax:
    min: int = 0
    max: int = 0


@dataclass
class LootRequest:
    preset_count: MinMax = field(default_factory=MinMax)
    item_count: MinMax = field(default_factory=MinMax)
    weapon_crate_count: MinMax = field(default_factory=MinMax)
    item_blacklist: List[str] = field(default_factory=list)
    item_type_whitelist: List[str] = field(default_factory=list)
    item_limits: Dict[str, int] = field(default_factory=dict)
    item_stack_limits: Dict[str, MinMax] = field(default_factory=dict)
    armor_level_whitelist: List[int] = field(default_factory=list)


@dataclass
class AirdropLootResult:
    drop_type: AirdropType
    loot: List[ItemSnapshot] = field(default_factory=list)
