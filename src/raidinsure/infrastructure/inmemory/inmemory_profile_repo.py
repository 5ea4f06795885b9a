from __future__ import annotations

from typing import Dict, Iterable, Optional

from raidinsure.domain.models.profile import PlayerProfile
from raidinsure.domain.repositories import ItemPriceRepository, ProfileRepository


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self, profiles: Iterable[PlayerProfile] = ()) -> None:
        self._profiles: Dict[str, PlayerProfile] = {profile.id: profile for profile in profiles}

    def get(self, profile_id: str) -> Optional[PlayerProfile]:
        return self._profiles.get(profile_id)

    def save(self, profile: PlayerProfile) -> None:
        self._profiles[profile.id] = profile


class InMemoryItemPriceRepository(ItemPriceRepository):
    def __init__(self, prices: Dict[str, float] | None = None) -> None:
        self._prices = dict(prices or {})

    def get_static_price(self, template_id: str) -> float:
        return float(self._prices.get(template_id, 0) or 0)
