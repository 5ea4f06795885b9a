import logging
import os
import random
from dataclasses import dataclass

from raidinsure.application.config import AirdropConfig, InsuranceConfig, load_airdrop_config, load_insurance_config
from raidinsure.application.services.airdrop_service import AirdropService
from raidinsure.application.services.clock import SystemClock
from raidinsure.application.services.event_bus import EventBus
from raidinsure.application.services.gear_loss_resolver import GearLossResolver
from raidinsure.application.services.insurance_dispatcher import InsuranceDispatcher, register_insurance_handlers
from raidinsure.application.services.insured_item_registry import InsuredItemRegistry
from raidinsure.application.services.premium_calculator import PremiumCalculator
from raidinsure.application.services.return_item_normalizer import ReturnItemNormalizer
from raidinsure.application.services.return_scheduler import ReturnScheduler
from raidinsure.application.services.seed_policy import derive_rng
from raidinsure.application.services.weighted_random import WeightedRandomSelector
from raidinsure.domain.repositories import (
    CounterpartyRepository,
    ItemPriceRepository,
    LootGenerator,
    MailGateway,
    ProfileRepository,
)
from raidinsure.infrastructure.inmemory.inmemory_counterparty_repo import InMemoryCounterpartyRepository
from raidinsure.infrastructure.inmemory.inmemory_loot_generator import InMemoryLootGenerator
from raidinsure.infrastructure.inmemory.inmemory_mailbox import InMemoryMailbox
from raidinsure.infrastructure.inmemory.inmemory_profile_repo import (
    InMemoryItemPriceRepository,
    InMemoryProfileRepository,
)


_LOGGER = logging.getLogger(__name__)


@dataclass
class InsuranceRuntime:
    config: InsuranceConfig
    event_bus: EventBus
    registry: InsuredItemRegistry
    dispatcher: InsuranceDispatcher
    premium_calculator: PremiumCalculator
    profile_repo: ProfileRepository
    counterparty_repo: CounterpartyRepository
    mail_gateway: MailGateway
    airdrop_service: AirdropService


def _rng_for(namespace: str) -> random.Random:
    seed = os.getenv("RAIDINS_RNG_SEED", "").strip()
    if not seed:
        return random.Random()
    return derive_rng(namespace, {"seed": seed})


def _build_mail_gateway() -> MailGateway:
    base_url = os.getenv("RAIDINS_MAIL_BASE_URL", "").strip()
    if not base_url:
        return InMemoryMailbox()

    from raidinsure.infrastructure.http_mail_gateway import HttpMailGateway

    return HttpMailGateway(
        base_url=base_url,
        timeout=float(os.getenv("RAIDINS_MAIL_TIMEOUT_S", "5")),
        retries=int(os.getenv("RAIDINS_MAIL_RETRIES", "2")),
        backoff_seconds=float(os.getenv("RAIDINS_MAIL_BACKOFF_S", "0.2")),
    )


def _build_profile_repo() -> ProfileRepository:
    if not os.getenv("RAIDINS_DATABASE_URL"):
        return InMemoryProfileRepository()

    from raidinsure.infrastructure.db.sql.connection import engine
    from raidinsure.infrastructure.db.sql.repos import SqlProfileRepository, apply_schema

    apply_schema(engine)
    return SqlProfileRepository()


def create_insurance_runtime(
    *,
    config: InsuranceConfig | None = None,
    profile_repo: ProfileRepository | None = None,
    counterparty_repo: CounterpartyRepository | None = None,
    price_repo: ItemPriceRepository | None = None,
    mail_gateway: MailGateway | None = None,
    clock: SystemClock | None = None,
    airdrop_config: AirdropConfig | None = None,
    loot_generator: LootGenerator | None = None,
) -> InsuranceRuntime:
    config = config or load_insurance_config()
    profile_repo = profile_repo or _build_profile_repo()
    counterparty_repo = counterparty_repo or InMemoryCounterpartyRepository()
    price_repo = price_repo or InMemoryItemPriceRepository()
    mail_gateway = mail_gateway or _build_mail_gateway()
    clock = clock or SystemClock()

    event_bus = EventBus()
    registry = InsuredItemRegistry()
    resolver = GearLossResolver(config.blacklisted_equipment_slots, normalizer=ReturnItemNormalizer())
    scheduler = ReturnScheduler(
        return_time_override_seconds=config.return_time_override_seconds,
        clock=clock,
        rng=_rng_for("insurance.return_time"),
    )
    dispatcher = InsuranceDispatcher(
        registry,
        resolver,
        scheduler,
        counterparty_repo,
        profile_repo,
        mail_gateway,
        event_bus=event_bus,
        clock=clock,
        rng=_rng_for("insurance.dialogue"),
    )
    register_insurance_handlers(event_bus, dispatcher=dispatcher)
    airdrop_service = AirdropService(
        airdrop_config or load_airdrop_config(),
        loot_generator or InMemoryLootGenerator(rng=_rng_for("airdrop.loot")),
        WeightedRandomSelector(_rng_for("airdrop.type")),
    )
    _LOGGER.debug(
        "Insurance runtime ready",
        extra={"profile_repo": type(profile_repo).__name__, "mail_gateway": type(mail_gateway).__name__},
    )

    return InsuranceRuntime(
        config=config,
        event_bus=event_bus,
        registry=registry,
        dispatcher=dispatcher,
        premium_calculator=PremiumCalculator(config, price_repo, counterparty_repo),
        profile_repo=profile_repo,
        counterparty_repo=counterparty_repo,
        mail_gateway=mail_gateway,
        airdrop_service=airdrop_service,
    )
