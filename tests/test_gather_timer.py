# tests/test_gather_timer.py
from tests.fixtures import GatheringTestBase, FakeDiscoveryGateway, FIRE, EARTH, WATER
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.scheduler import Scheduler
from runegather.gathering.discovery import DiscoveryGateway, DiscoveryResult, LocalDiscoveryGateway
from runegather.gathering.gather_timer import GatherState, GatherTimer


class _ScriptedGateway(DiscoveryGateway):
    """Answers with the given responses in turn, whatever their shape."""

    def __init__(self, responses):
        self.responses = list(responses)

    def discover(self, resource_id, character_id):
        return self.responses.pop(0)


class TestGatherTimerStandalone(GatheringTestBase):
    """The timer on its own, with nobody resetting it after completion."""

    def setUp(self):
        super().setUp()
        self.bus = EventSystem()
        self.clock = Scheduler()
        self.solo_gateway = FakeDiscoveryGateway()
        self.solo = GatherTimer(self.clock, self.solo_gateway, self.bus, "hero")
        self.iron = self.resource("r1")

    def test_start_requires_matching_selection(self):
        self.assertFalse(self.solo.start(self.iron, [FIRE]))
        self.assertFalse(self.solo.start(self.iron, [FIRE, WATER]))
        self.assertEqual(self.solo.state, GatherState.IDLE)
        self.assertTrue(self.solo.start(self.iron, [EARTH, FIRE]))
        self.assertEqual(self.solo.state, GatherState.ACCUMULATING)

    def test_only_one_run_at_a_time(self):
        self.assertTrue(self.solo.start(self.iron, [FIRE, EARTH]))
        self.assertFalse(self.solo.start(self.iron, [FIRE, EARTH]))
        self.assertFalse(self.solo.start(self.resource("r2"), [WATER, EARTH]))
        self.assertIs(self.solo.resource, self.iron)

    def test_single_discovery_call_per_run(self):
        """Re-evaluating and restarting during and after the run never adds a call."""
        self.solo.start(self.iron, [FIRE, EARTH])
        for _ in range(40):
            self.solo.start(self.iron, [FIRE, EARTH])
            self.clock.update(100)
        self.assertEqual(self.solo.state, GatherState.COMPLETE)
        self.assertEqual(self.solo_gateway.calls, [("r1", "hero")])
        self.assertEqual(self.solo.discovery_calls, 1)

        # COMPLETE still refuses a new start until someone stops the timer
        self.assertFalse(self.solo.start(self.iron, [FIRE, EARTH]))
        self.clock.update(5000)
        self.assertEqual(len(self.solo_gateway.calls), 1)
        self.assertEqual(self.solo.progress, 100)

        self.assertTrue(self.solo.stop())
        self.assertEqual(self.solo.progress, 0)
        self.assertTrue(self.solo.start(self.iron, [FIRE, EARTH]))

    def test_progress_is_monotonic_and_clamped(self):
        seen = []
        self.bus.subscribe(events.GATHER_PROGRESS, lambda et, data: seen.append(data["progress"]))
        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(10000)

        self.assertEqual(len(seen), 34)
        self.assertEqual(seen, sorted(seen))
        self.assertEqual(seen[-1], 100)
        self.assertTrue(all(0 < p <= 100 for p in seen))

    def test_stop_is_idempotent_and_cancels_ticks(self):
        self.assertFalse(self.solo.stop(), "Stopping an idle timer is a no-op.")

        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(1000)
        self.assertEqual(self.solo.progress, 30)

        self.assertTrue(self.solo.stop())
        self.assertFalse(self.solo.stop())
        self.assertEqual(self.solo.state, GatherState.IDLE)
        self.assertEqual(self.solo.progress, 0)

        self.clock.update(10000)
        self.assertEqual(self.solo.progress, 0)
        self.assertEqual(self.solo_gateway.calls, [])

    def test_failed_discovery_is_not_retried(self):
        failed = []
        self.bus.subscribe(events.GATHER_FAILED, lambda et, data: failed.append(data))
        self.solo_gateway.fail_ids.add("r1")

        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(10000)

        self.assertEqual(len(failed), 1)
        self.assertFalse(failed[0]["result"].success)
        self.assertEqual(failed[0]["result"].message, "server said no")
        self.assertIs(self.solo.last_result, failed[0]["result"])
        self.assertFalse(self.iron.discovered)
        self.assertEqual(len(self.solo_gateway.calls), 1)

    def test_gateway_exception_becomes_failure(self):
        failed = []
        self.bus.subscribe(events.GATHER_FAILED, lambda et, data: failed.append(data))
        self.solo_gateway.raise_ids.add("r1")

        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(10000)

        self.assertEqual(len(failed), 1)
        self.assertIn("unreachable", failed[0]["result"].message)
        self.assertFalse(self.iron.discovered)
        self.assertEqual(self.solo.state, GatherState.COMPLETE)

    def test_refused_discovery_becomes_failure(self):
        failed = []
        self.bus.subscribe(events.GATHER_FAILED, lambda et, data: failed.append(data))
        self.solo_gateway.refuse_ids.add("r1")

        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(10000)

        self.assertEqual(failed[0]["result"].message, "character is too far away")
        self.assertFalse(self.iron.discovered)

    def test_mapping_responses_are_understood(self):
        outcomes = []
        for event_type in (events.GATHER_COMPLETED, events.GATHER_FAILED):
            self.bus.subscribe(event_type, lambda et, data: outcomes.append((et, data["result"])))
        responses = [{"success": False, "message": "not yet"}, {"success": True}, None]
        self.solo.gateway = _ScriptedGateway(responses)

        for _ in responses:
            self.solo.stop()
            self.solo.start(self.iron, [FIRE, EARTH])
            self.clock.update(3400)
            self.assertEqual(self.solo.state, GatherState.COMPLETE)

        self.assertEqual([et for et, _ in outcomes],
                         [events.GATHER_FAILED, events.GATHER_COMPLETED, events.GATHER_FAILED])
        self.assertEqual(outcomes[0][1].message, "not yet")
        self.assertIsInstance(outcomes[1][1], DiscoveryResult)
        self.assertTrue(self.iron.discovered)
        self.assertEqual(self.clock.pending_count(), 0)

    def test_listener_stopping_at_full_progress_prevents_discovery(self):
        def stop_at_full(et, data):
            if data["progress"] >= 100:
                self.solo.stop()

        self.bus.subscribe(events.GATHER_PROGRESS, stop_at_full)
        self.solo.start(self.iron, [FIRE, EARTH])
        self.clock.update(10000)
        self.assertEqual(self.solo_gateway.calls, [])
        self.assertEqual(self.solo.state, GatherState.IDLE)


class TestManualGatherRun(GatheringTestBase):
    """Scenario: Iron Ore requires Fire+Earth, the player places Earth then Fire."""

    def test_iron_ore_scenario(self):
        iron = self.resource("r1")
        self.assertTrue(self.controller.select_resource("r1"))
        self.controller.toggle_element(EARTH)
        self.assertFalse(self.timer.is_running)
        self.controller.toggle_element(FIRE)
        self.assertTrue(self.timer.is_running)

        self.advance(3300)
        self.assertEqual(self.timer.progress, 99)
        self.assertEqual(self.gateway.calls, [])

        self.advance(100)
        self.assertEqual(self.gateway.calls, [("r1", "hero")])
        self.assertTrue(iron.discovered)
        self.assertEqual(len(self.recorder.of(events.GATHER_COMPLETED)), 1)

        # The session is reset after the run
        self.assertIsNone(self.session.target_resource)
        self.assertEqual(self.timer.state, GatherState.IDLE)
        self.assertEqual(self.timer.progress, 0)

        self.advance(5000)
        self.assertEqual(len(self.gateway.calls), 1)

    def test_successful_gather_is_journaled(self):
        self.controller.select_resource("r1")
        self.controller.toggle_element(FIRE)
        self.controller.toggle_element(EARTH)
        self.advance(3400)
        items = self.journal.get_entries_by_type("item")
        self.assertEqual(len(items), 1)
        self.assertIn("Iron Ore", items[0].text)

    def test_breaking_the_combination_resets_progress(self):
        self.controller.select_resource("r1")
        self.controller.toggle_element(FIRE)
        self.controller.toggle_element(EARTH)
        self.advance(1500)
        self.assertEqual(self.timer.progress, 45)

        self.controller.toggle_element(WATER)
        self.assertFalse(self.timer.is_running)
        self.assertEqual(self.timer.progress, 0)

        self.controller.toggle_element(WATER)
        self.assertTrue(self.timer.is_running)
        self.assertEqual(self.timer.progress, 0)
        self.advance(3400)
        self.assertEqual(len(self.gateway.calls), 1)

    def test_manual_failure_discards_run_and_journals_error(self):
        self.gateway.fail_ids.add("r1")
        self.controller.select_resource("r1")
        self.controller.toggle_element(FIRE)
        self.controller.toggle_element(EARTH)
        self.advance(3400)

        self.assertFalse(self.resource("r1").discovered)
        self.assertEqual(self.timer.state, GatherState.IDLE)
        self.assertIsNone(self.session.target_resource)
        errors = self.journal.get_entries_by_type("error")
        self.assertEqual(len(errors), 1)
        self.assertIn("Iron Ore", errors[0].text)

        self.advance(5000)
        self.assertEqual(len(self.gateway.calls), 1, "No automatic retry after a failure.")


class TestLocalDiscoveryGateway(GatheringTestBase):

    def test_repeat_discovery_is_harmless(self):
        gateway = LocalDiscoveryGateway()
        first = gateway.discover("r1", "hero")
        second = gateway.discover("r1", "hero")
        self.assertTrue(first.success)
        self.assertTrue(second.success)
        self.assertEqual(second.message, "Resource already discovered.")
        self.assertTrue(gateway.is_discovered("r1", "hero"))
        self.assertFalse(gateway.is_discovered("r1", "someone else"))
