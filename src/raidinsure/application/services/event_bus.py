from __future__ import annotations

import bisect
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, List, Optional, Type, TypeVar


Handler = Callable[[Any], Any]
T = TypeVar("T")


@dataclass(frozen=True)
class HandlerOutcome:
    handler: str
    value: Any = None
    error: Optional[Exception] = None


@dataclass
class PublishReport:
    """What every handler returned (or raised) for one published event."""

    event: object
    outcomes: List[HandlerOutcome] = field(default_factory=list)

    @property
    def errors(self) -> List[Exception]:
        return [outcome.error for outcome in self.outcomes if outcome.error is not None]

    @property
    def ok(self) -> bool:
        return not self.errors

    def value_of(self, value_type: Type[T]) -> Optional[T]:
        """First handler result of ``value_type``, e.g. the RaidExitSummary of a RaidExited publish."""
        for outcome in self.outcomes:
            if isinstance(outcome.value, value_type):
                return outcome.value
        return None


@dataclass(order=True)
class _Subscription:
    priority: int
    sequence: int
    handler: Handler = field(compare=False)
    propagate_errors: bool = field(default=False, compare=False)

    @property
    def name(self) -> str:
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)


class EventBus:
    """Synchronous dispatch of raid lifecycle events.

    Handlers run by ascending priority, then subscription order. A handler
    subscribed with ``propagate_errors`` stops the publish and re-raises to the
    publisher; any other failing handler is logged and reported while the
    rest still run.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[type, List[_Subscription]] = defaultdict(list)
        self._sequence = 0
        self._logger = logging.getLogger(__name__)

    def subscribe(
        self,
        event_type: type,
        handler: Handler,
        *,
        priority: int = 100,
        propagate_errors: bool = False,
    ) -> None:
        subscription = _Subscription(int(priority), self._sequence, handler, propagate_errors)
        self._sequence += 1
        bisect.insort(self._subscriptions[event_type], subscription)

    def publish(self, event: object) -> PublishReport:
        report = PublishReport(event=event)
        event_name = type(event).__name__
        for subscription in list(self._subscriptions.get(type(event), ())):
            try:
                value = subscription.handler(event)
            except Exception as exc:
                self._logger.exception(
                    "Handler %s failed for %s",
                    subscription.name,
                    event_name,
                    extra={
                        "event_type": event_name,
                        "handler": subscription.name,
                        "propagated": subscription.propagate_errors,
                    },
                )
                if subscription.propagate_errors:
                    raise
                report.outcomes.append(HandlerOutcome(handler=subscription.name, error=exc))
                continue
            report.outcomes.append(HandlerOutcome(handler=subscription.name, value=value))
        return report
