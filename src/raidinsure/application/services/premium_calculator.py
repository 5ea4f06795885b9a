from __future__ import annotations

import logging
import math

from raidinsure.application.config import InsuranceConfig
from raidinsure.application.services.insurance_tables import DEFAULT_INSURANCE_MULTIPLIER
from raidinsure.application.services.outcome import ConfigurationGap, Outcome
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile
from raidinsure.domain.repositories import CounterpartyRepository, ItemPriceRepository


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PremiumCalculator:
    def __init__(
        self,
        config: InsuranceConfig,
        price_repo: ItemPriceRepository,
        counterparty_repo: CounterpartyRepository,
    ) -> None:
        self.config = config
        self.price_repo = price_repo
        self.counterparty_repo = counterparty_repo
        self._logger = logging.getLogger(__name__)

    def multiplier_for(self, counterparty_id: str) -> Outcome[float]:
        multiplier = self.config.insurance_multiplier.get(counterparty_id)
        if not multiplier:
            return Outcome.defaulted(
                DEFAULT_INSURANCE_MULTIPLIER,
                ConfigurationGap(
                    kind="insurance_multiplier",
                    subject=counterparty_id,
                    detail=f"defaulting to {DEFAULT_INSURANCE_MULTIPLIER}",
                ),
            )
        return Outcome.success(float(multiplier))

    def loyalty_discount(self, profile: PlayerProfile, counterparty_id: str) -> float:
        counterparty = self.counterparty_repo.get(counterparty_id)
        if counterparty is None:
            return 0.0
        level = counterparty.loyalty_level(profile.loyalty_level_with(counterparty_id))
        if level is None:
            return 0.0
        return float(level.insurance_price_coef or 0.0)

    def quote(self, profile: PlayerProfile, item: ItemSnapshot, counterparty_id: str) -> Outcome[int]:
        multiplier = self.multiplier_for(counterparty_id)
        if multiplier.gap is not None:
            self._logger.warning(
                multiplier.gap.describe(),
                extra={"counterparty_id": counterparty_id, "template_id": item.template_id},
            )

        price = float(self.price_repo.get_static_price(item.template_id)) * multiplier.value_or(DEFAULT_INSURANCE_MULTIPLIER)
        discount = self.loyalty_discount(profile, counterparty_id)
        if discount > 0:
            price *= 1 - discount / 100

        return Outcome(value=_round_half_up(price), gap=multiplier.gap)

    def premium(self, profile: PlayerProfile, item: ItemSnapshot, counterparty_id: str) -> int:
        return int(self.quote(profile, item, counterparty_id).value_or(0))
