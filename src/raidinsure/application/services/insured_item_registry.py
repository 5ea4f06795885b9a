from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, List, Optional

from raidinsure.domain.models.item import ItemSnapshot


class DispatchState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FLUSHED = "flushed"


class InsuredItemRegistry:
    """Items being processed for return, keyed by player then counterparty.

    One instance is shared by the whole process. The dispatcher is the only
    writer; the read accessors are safe for anyone.
    """

    def __init__(self) -> None:
        self._insured: Dict[str, Dict[str, List[ItemSnapshot]]] = {}
        self._states: Dict[str, DispatchState] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @contextmanager
    def player_lock(self, player_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(player_id, threading.RLock())
        with lock:
            yield

    def state_of(self, player_id: str) -> DispatchState:
        return self._states.get(player_id, DispatchState.IDLE)

    def begin_resolving(self, player_id: str) -> None:
        if self._insured.get(player_id):
            self._logger.error(
                "Insurance registry already populated for player, overwriting",
                extra={"player_id": player_id, "counterparties": sorted(self._insured[player_id])},
            )
        self._insured[player_id] = {}
        self._states[player_id] = DispatchState.RESOLVING

    def mark_flushed(self, player_id: str) -> None:
        self._states[player_id] = DispatchState.FLUSHED

    def insurance_exists(self, player_id: str) -> bool:
        return player_id in self._insured

    def get_insurance(self, player_id: str) -> Dict[str, List[ItemSnapshot]]:
        return {counterparty_id: list(items) for counterparty_id, items in self._insured.get(player_id, {}).items()}

    def get_insurance_items(self, player_id: str, counterparty_id: str) -> List[ItemSnapshot]:
        return list(self._insured.get(player_id, {}).get(counterparty_id, []))

    def ensure_bucket(self, player_id: str, counterparty_id: str) -> List[ItemSnapshot]:
        player_buckets = self._insured.setdefault(player_id, {})
        return player_buckets.setdefault(counterparty_id, [])

    def add_item(self, player_id: str, counterparty_id: str, item: ItemSnapshot) -> None:
        owner = self._bucket_holding(player_id, item.id)
        if owner is not None and owner != counterparty_id:
            self._logger.error(
                "Insured item already held for another counterparty",
                extra={"player_id": player_id, "item_id": item.id, "counterparty_id": owner},
            )
        self.ensure_bucket(player_id, counterparty_id).append(item)

    def _bucket_holding(self, player_id: str, item_id: str) -> Optional[str]:
        for counterparty_id, items in self._insured.get(player_id, {}).items():
            if any(existing.id == item_id for existing in items):
                return counterparty_id
        return None

    def flush_and_clear(self, player_id: str) -> Dict[str, List[ItemSnapshot]]:
        """Hand back everything held for the player and return them to idle."""
        flushed = self._insured.pop(player_id, {})
        self._states.pop(player_id, None)
        return flushed
