from __future__ import annotations

import logging

from raidinsure.application.config import AirdropConfig
from raidinsure.application.services.weighted_random import WeightedRandomSelector
from raidinsure.domain.models.airdrop import AirdropLootResult, AirdropType, LootRequest
from raidinsure.domain.repositories import LootGenerator


class AirdropService:
    def __init__(
        self,
        config: AirdropConfig,
        loot_generator: LootGenerator,
        selector: WeightedRandomSelector | None = None,
    ) -> None:
        self.config = config
        self.loot_generator = loot_generator
        self.selector = selector or WeightedRandomSelector()
        self._logger = logging.getLogger(__name__)

    def choose_airdrop_type(self) -> AirdropType:
        return AirdropType(self.selector.choose(self.config.airdrop_type_weightings))

    def loot_request_for(self, airdrop_type: AirdropType) -> LootRequest:
        request = self.config.loot.get(airdrop_type.value)
        if request is None:
            self._logger.error(
                "No airdrop loot config for type %s, using mixed",
                airdrop_type.value,
                extra={"airdrop_type": airdrop_type.value},
            )
            request = self.config.loot.get(AirdropType.MIXED.value, LootRequest())
        return request

    def get_airdrop_loot(self, airdrop_type: AirdropType | None = None) -> AirdropLootResult:
        """Loot for one airdrop; the type is drawn from the weightings unless one is given."""
        if airdrop_type is None:
            airdrop_type = self.choose_airdrop_type()
            self._logger.debug("Chose %s for airdrop loot", airdrop_type.value)
        request = self.loot_request_for(airdrop_type)
        return AirdropLootResult(drop_type=airdrop_type, loot=self.loot_generator.create_random_loot(request))
