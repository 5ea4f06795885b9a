from __future__ import annotations

import logging
import math
import random

from raidinsure.application.services.clock import SystemClock
from raidinsure.application.services.insurance_tables import ONE_HOUR_AS_SECONDS
from raidinsure.domain.models.counterparty import Counterparty, InsuranceTerms
from raidinsure.domain.models.profile import INSURANCE_RETURN_TIME_BONUS, PlayerProfile


class ReturnScheduler:
    def __init__(
        self,
        return_time_override_seconds: int = 0,
        clock: SystemClock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.return_time_override_seconds = int(return_time_override_seconds)
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def bonus_factor(profile: PlayerProfile) -> float:
        bonus = profile.find_bonus(INSURANCE_RETURN_TIME_BONUS)
        percent = abs(bonus.value) if bonus is not None else 0.0
        return 1.0 - percent / 100

    def return_timestamp(self, profile: PlayerProfile, counterparty: Counterparty) -> float:
        """Seconds-since-epoch at which ``counterparty`` mails the items back."""
        now = self.clock.timestamp()
        if self.return_time_override_seconds > 0:
            self._logger.debug(
                "Insurance override used: returning in %s seconds",
                self.return_time_override_seconds,
            )
            return now + self.return_time_override_seconds

        terms = counterparty.insurance or InsuranceTerms()
        low, high = sorted((float(terms.min_return_hours), float(terms.max_return_hours)))
        randomised_seconds = self._draw_seconds(low * ONE_HOUR_AS_SECONDS, high * ONE_HOUR_AS_SECONDS)

        return now + randomised_seconds * self.bonus_factor(profile)

    def _draw_seconds(self, low: float, high: float) -> float:
        """Whole seconds drawn inside ``[low, high]``; bounds are scaled before rounding inward."""
        first = math.ceil(low)
        last = math.floor(high)
        if first > last:
            # No whole second fits a fractional zero-width window
            return low
        return self.rng.randint(first, last)
