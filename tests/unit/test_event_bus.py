import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from raidinsure.application.dtos import RaidExitSummary
from raidinsure.application.services.event_bus import EventBus
from raidinsure.domain.events import InsuranceLost, RaidExited


def _raid_exit() -> RaidExited:
    return RaidExited(session_id="pmc1", profile_id="pmc1")


class EventBusTests(unittest.TestCase):
    def test_publish_notifies_all_handlers_for_event_type(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        bus.subscribe(InsuranceLost, lambda evt: seen.append("first"))
        bus.subscribe(InsuranceLost, lambda evt: seen.append("second"))

        bus.publish(InsuranceLost(session_id="pmc1", counterparty_id="trader", location_name="bigmap"))

        self.assertEqual(["first", "second"], seen)

    def test_publish_filters_handlers_by_event_class(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        bus.subscribe(RaidExited, lambda evt: seen.append("raid"))
        bus.subscribe(InsuranceLost, lambda evt: seen.append("lost"))

        report = bus.publish(_raid_exit())

        self.assertEqual(["raid"], seen)
        self.assertEqual(1, len(report.outcomes))

    def test_lower_priority_runs_first(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        bus.subscribe(RaidExited, lambda evt: seen.append("late"), priority=200)
        bus.subscribe(RaidExited, lambda evt: seen.append("early"), priority=10)
        bus.subscribe(RaidExited, lambda evt: seen.append("default"))

        bus.publish(_raid_exit())

        self.assertEqual(["early", "default", "late"], seen)

    def test_report_carries_handler_results(self) -> None:
        bus = EventBus()
        bus.subscribe(RaidExited, lambda evt: None, priority=1)
        bus.subscribe(RaidExited, lambda evt: RaidExitSummary(session_id=evt.session_id, returned_item_ids=["a"]))

        report = bus.publish(_raid_exit())

        self.assertTrue(report.ok)
        self.assertEqual(["a"], report.value_of(RaidExitSummary).returned_item_ids)

    def test_value_of_is_none_without_matching_result(self) -> None:
        report = EventBus().publish(_raid_exit())

        self.assertEqual([], report.outcomes)
        self.assertIsNone(report.value_of(RaidExitSummary))

    def test_isolated_handler_failure_is_reported_and_later_handlers_run(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        def explode(_event) -> None:
            raise RuntimeError("boom")

        bus.subscribe(RaidExited, explode, priority=1)
        bus.subscribe(RaidExited, lambda evt: seen.append("after"), priority=2)

        with self.assertLogs("raidinsure.application.services.event_bus", level="ERROR"):
            report = bus.publish(_raid_exit())

        self.assertEqual(["after"], seen)
        self.assertFalse(report.ok)
        self.assertEqual(1, len(report.errors))
        self.assertIsInstance(report.errors[0], RuntimeError)
        self.assertIn("explode", report.outcomes[0].handler)

    def test_propagating_handler_failure_reaches_publisher(self) -> None:
        bus = EventBus()
        seen: list[str] = []

        def explode(_event) -> None:
            raise RuntimeError("profile store offline")

        bus.subscribe(RaidExited, explode, priority=1, propagate_errors=True)
        bus.subscribe(RaidExited, lambda evt: seen.append("after"), priority=2)

        with self.assertLogs("raidinsure.application.services.event_bus", level="ERROR"):
            with self.assertRaises(RuntimeError):
                bus.publish(_raid_exit())

        self.assertEqual([], seen)

    def test_each_publish_gets_its_own_report(self) -> None:
        bus = EventBus()
        calls = {"count": 0}

        def flaky(_event) -> None:
            calls["count"] += 1
            if calls["count"] == 1:
                raise RuntimeError("first only")

        bus.subscribe(RaidExited, flaky)
        with self.assertLogs("raidinsure.application.services.event_bus", level="ERROR"):
            first = bus.publish(_raid_exit())
        second = bus.publish(_raid_exit())

        self.assertFalse(first.ok)
        self.assertTrue(second.ok)


if __name__ == "__main__":
    unittest.main()
