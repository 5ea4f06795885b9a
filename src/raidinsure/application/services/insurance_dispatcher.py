from __future__ import annotations

import dataclasses
import logging
import random
from typing import List, Sequence

from raidinsure.application.dtos import RaidExitSummary
from raidinsure.application.services.clock import SystemClock
from raidinsure.application.services.event_bus import EventBus
from raidinsure.application.services.gear_loss_resolver import GearLossResolver
from raidinsure.application.services.insurance_tables import HIGH_LETHALITY_LOCATION
from raidinsure.application.services.insured_item_registry import InsuredItemRegistry
from raidinsure.application.services.outcome import ConfigurationGap, Outcome
from raidinsure.application.services.return_item_normalizer import ReturnItemNormalizer
from raidinsure.application.services.return_scheduler import ReturnScheduler
from raidinsure.domain.events import InsuranceLost, InsuranceReturnScheduled, RaidExited
from raidinsure.domain.models.counterparty import PRAPOR_ID, Counterparty
from raidinsure.domain.models.insurance import InsuranceRecord, MessageContent, MessageType
from raidinsure.domain.models.item import ClientInsuredItemData, ItemSnapshot
from raidinsure.domain.models.profile import InsuredItemReference, PlayerProfile
from raidinsure.domain.repositories import CounterpartyRepository, MailGateway, ProfileRepository


class InsuranceDispatcher:
    """Moves insured gear from "lost in raid" to "scheduled for return".

    Per player the registry walks IDLE -> RESOLVING -> FLUSHED -> IDLE:
    ``store_lost_gear`` fills the registry, ``send_insured_items`` turns every
    counterparty bucket into an InsuranceRecord on the profile and then clears
    the player's entry.
    """

    def __init__(
        self,
        registry: InsuredItemRegistry,
        resolver: GearLossResolver,
        scheduler: ReturnScheduler,
        counterparty_repo: CounterpartyRepository,
        profile_repo: ProfileRepository,
        mail_gateway: MailGateway,
        *,
        event_bus: EventBus | None = None,
        clock: SystemClock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.scheduler = scheduler
        self.counterparty_repo = counterparty_repo
        self.profile_repo = profile_repo
        self.mail_gateway = mail_gateway
        self.event_bus = event_bus
        self.clock = clock or scheduler.clock
        self.rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def handle_raid_exit(self, event: RaidExited) -> RaidExitSummary:
        profile = self.profile_repo.get(event.profile_id)
        if profile is None:
            self._logger.warning("Raid exit for unknown profile", extra={"profile_id": event.profile_id})
            return RaidExitSummary(session_id=event.session_id)

        with self.registry.player_lock(profile.id):
            returned = self.store_lost_gear(
                profile,
                event.pre_session_items,
                event.post_session_items,
                client_insurance=event.client_insurance,
                session_id=event.session_id,
                player_died=event.player_died,
            )
            summary = self.send_insured_items(profile, event.session_id, event.location_name)
        summary.returned_item_ids = returned
        return summary

    def store_lost_gear(
        self,
        profile: PlayerProfile,
        pre_session_items: Sequence[ItemSnapshot],
        post_session_items: Sequence[ItemSnapshot],
        *,
        client_insurance: Sequence[ClientInsuredItemData] = (),
        session_id: str | None = None,
        player_died: bool = False,
    ) -> List[str]:
        """Register every insured item lost in the raid; returns the registered item ids."""
        self.registry.begin_resolving(profile.id)
        candidates = self.resolver.resolve(
            profile,
            pre_session_items,
            post_session_items,
            client_insurance=client_insurance,
            player_died=player_died,
            session_id=session_id,
        )

        registered: List[str] = []
        for candidate in candidates:
            self.registry.add_item(profile.id, candidate.counterparty_id, candidate.return_item)
            profile.remove_insured_item(candidate.return_item.id)
            registered.append(candidate.return_item.id)
        return registered

    def send_insured_items(self, profile: PlayerProfile, session_id: str, location_name: str) -> RaidExitSummary:
        """Turn every registry bucket into a pending return, one counterparty at a time.

        A counterparty whose templates are missing, or whose mail delivery fails,
        is skipped and listed in the summary; a delivery failure also puts its
        insurance references back on the profile. The profile is saved and the
        registry cleared whatever happens.
        """
        summary = RaidExitSummary(session_id=session_id)
        try:
            for counterparty_id, items in self.registry.get_insurance(profile.id).items():
                if not items:
                    continue

                counterparty = self._counterparty_with_templates(counterparty_id)
                if counterparty.gap is not None:
                    self._logger.error(
                        counterparty.gap.describe(),
                        extra={"player_id": profile.id, "counterparty_id": counterparty_id, "item_count": len(items)},
                    )
                    summary.skipped_counterparties.append(counterparty_id)
                    continue

                try:
                    record = self._schedule_return(profile, counterparty.value, items, location_name)
                except Exception:
                    self._logger.exception(
                        "Insurance return not scheduled, references kept on profile",
                        extra={"player_id": profile.id, "counterparty_id": counterparty_id, "item_count": len(items)},
                    )
                    profile.insured_items.extend(
                        InsuredItemReference(item_id=item.id, counterparty_id=counterparty_id) for item in items
                    )
                    summary.skipped_counterparties.append(counterparty_id)
                    continue
                profile.pending_returns.append(record)
                summary.records.append(record)
                if self.event_bus is not None:
                    self.event_bus.publish(
                        InsuranceReturnScheduled(
                            session_id=session_id,
                            counterparty_id=counterparty_id,
                            scheduled_time=record.scheduled_time,
                            item_count=len(record.items),
                        )
                    )
        finally:
            try:
                self.profile_repo.save(profile)
            finally:
                self.registry.mark_flushed(profile.id)
                self.registry.flush_and_clear(profile.id)
        return summary

    def send_lost_insurance_message(
        self,
        session_id: str,
        location_name: str = "",
        counterparty_id: str = PRAPOR_ID,
    ) -> Outcome[MessageContent]:
        """Tell the player that nothing insured with ``counterparty_id`` survived."""
        counterparty = self.counterparty_repo.get(counterparty_id)
        dialogue = counterparty.dialogue if counterparty is not None else None
        on_labs = (location_name or "").lower() == HIGH_LETHALITY_LOCATION
        templates = []
        if dialogue is not None:
            templates = dialogue.insurance_failed_labs if on_labs else dialogue.insurance_failed
        if not templates:
            gap = ConfigurationGap(
                kind="insurance_failed_labs" if on_labs else "insurance_failed",
                subject=counterparty_id,
                detail="lost insurance message not sent",
            )
            self._logger.error(gap.describe(), extra={"session_id": session_id, "location": location_name})
            return Outcome.skipped(gap)

        message = MessageContent(
            template_id=self.rng.choice(templates),
            type=MessageType.NPC_TRADER,
            system_data={"location": location_name},
        )
        self.mail_gateway.deliver(session_id, counterparty_id, message)
        if self.event_bus is not None:
            self.event_bus.publish(
                InsuranceLost(session_id=session_id, counterparty_id=counterparty_id, location_name=location_name)
            )
        return Outcome.success(message)

    def _counterparty_with_templates(self, counterparty_id: str) -> Outcome[Counterparty]:
        counterparty = self.counterparty_repo.get(counterparty_id)
        if counterparty is None:
            return Outcome.skipped(ConfigurationGap(kind="counterparty", subject=counterparty_id))
        if counterparty.dialogue is None or not counterparty.dialogue.has_return_templates():
            return Outcome.skipped(
                ConfigurationGap(kind="insurance dialogue templates", subject=counterparty_id, detail="no return sent")
            )
        return Outcome.success(counterparty)

    def _schedule_return(
        self,
        profile: PlayerProfile,
        counterparty: Counterparty,
        items: List[ItemSnapshot],
        location_name: str,
    ) -> InsuranceRecord:
        scheduled_time = self.scheduler.return_timestamp(profile, counterparty)
        system_data = {
            "date": self.clock.date_mail_format(),
            "time": self.clock.time_mail_format(),
            "location": location_name,
        }

        # Live insurance returns carry an empty text and no profile change events
        searching = MessageContent(
            template_id=self.rng.choice(counterparty.dialogue.insurance_start),
            type=MessageType.NPC_TRADER,
            max_storage_time=counterparty.insurance.max_storage_time,
            text="",
            profile_change_events=[],
            system_data=system_data,
        )
        self.mail_gateway.deliver(profile.id, counterparty.id, searching)

        found = dataclasses.replace(
            searching,
            template_id=self.rng.choice(counterparty.dialogue.insurance_found),
            type=MessageType.INSURANCE_RETURN,
            profile_change_events=[],
            system_data=dict(system_data),
        )
        return InsuranceRecord(
            counterparty_id=counterparty.id,
            scheduled_time=scheduled_time,
            message_content=found,
            items=ReturnItemNormalizer.normalize_root_items(items),
        )


def register_insurance_handlers(event_bus: EventBus, *, dispatcher: InsuranceDispatcher) -> None:
    event_bus.subscribe(RaidExited, dispatcher.handle_raid_exit, priority=50, propagate_errors=True)
