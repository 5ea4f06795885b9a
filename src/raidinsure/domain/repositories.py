from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from raidinsure.domain.models.airdrop import LootRequest
from raidinsure.domain.models.counterparty import Counterparty
from raidinsure.domain.models.insurance import MessageContent
from raidinsure.domain.models.item import ItemSnapshot
from raidinsure.domain.models.profile import PlayerProfile


class ProfileRepository(ABC):
    @abstractmethod
    def get(self, profile_id: str) -> Optional[PlayerProfile]:
        raise NotImplementedError

    @abstractmethod
    def save(self, profile: PlayerProfile) -> None:
        raise NotImplementedError

    def list_pending_returns(self, profile_id: str):
        """Convenience read used by the CLI and external delivery pollers."""
        profile = self.get(profile_id)
        return list(profile.pending_returns) if profile is not None else []


class CounterpartyRepository(ABC):
    @abstractmethod
    def get(self, counterparty_id: str) -> Optional[Counterparty]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Counterparty]:
        raise NotImplementedError


class ItemPriceRepository(ABC):
    @abstractmethod
    def get_static_price(self, template_id: str) -> float:
        raise NotImplementedError


class MailGateway(ABC):
    @abstractmethod
    def deliver(
        self,
        player_id: str,
        counterparty_id: str,
        message: MessageContent,
        items: Sequence[ItemSnapshot] = (),
        scheduled_time: float | None = None,
    ) -> None:
        raise NotImplementedError


class LootGenerator(ABC):
    @abstractmethod
    def create_random_loot(self, request: LootRequest) -> List[ItemSnapshot]:
        raise NotImplementedError
