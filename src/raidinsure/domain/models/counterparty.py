from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


PRAPOR_ID = "54cb50c76803fa8b248b4571"
THERAPIST_ID = "54cb57776803fa99248b456e"


@dataclass(frozen=True)
class InsuranceTerms:
    min_return_hours: float = 24
    max_return_hours: float = 36
    max_storage_time: int = 96


@dataclass(frozen=True)
class LoyaltyLevel:
    min_level: int = 1
    insurance_price_coef: float = 0.0


@dataclass
class DialogueTemplates:
    insurance_start: List[str] = field(default_factory=list)
    insurance_found: List[str] = field(default_factory=list)
    insurance_failed: List[str] = field(default_factory=list)
    insurance_failed_labs: List[str] = field(default_factory=list)

    def has_return_templates(self) -> bool:
        return bool(self.insurance_start) and bool(self.insurance_found)


@dataclass
class Counterparty:
    """A trader players can insure gear with."""

    id: str
    name: str
    insurance: InsuranceTerms = field(default_factory=InsuranceTerms)
    loyalty_levels: List[LoyaltyLevel] = field(default_factory=list)
    dialogue: Optional[DialogueTemplates] = None

    def loyalty_level(self, level: int) -> Optional[LoyaltyLevel]:
        if not self.loyalty_levels:
            return None
        index = max(1, min(int(level), len(self.loyalty_levels))) - 1
        return self.loyalty_levels[index]
