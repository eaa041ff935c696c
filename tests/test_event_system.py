# tests/test_event_system.py
import unittest

from tests.fixtures import EventRecorder
from runegather.core.event_system import EventSystem
from runegather.utils.logger import Logger, LogLevel


class TestEventSystem(unittest.TestCase):

    def setUp(self):
        Logger.set_level(LogLevel.CRITICAL)
        self.events = EventSystem()

    def tearDown(self):
        Logger.set_level(LogLevel.INFO)

    def test_subscribers_called_in_order(self):
        calls = []
        self.events.subscribe("ping", lambda et, data: calls.append(("a", data)))
        self.events.subscribe("ping", lambda et, data: calls.append(("b", data)))
        self.events.publish("ping", 1)
        self.assertEqual(calls, [("a", 1), ("b", 1)])

    def test_duplicate_subscription_ignored(self):
        recorder = EventRecorder(self.events)
        self.events.subscribe("ping", recorder)
        self.events.subscribe("ping", recorder)
        self.events.publish("ping")
        self.assertEqual(len(recorder.received), 1)

    def test_unsubscribe(self):
        recorder = EventRecorder(self.events, "ping")
        self.events.unsubscribe("ping", recorder)
        self.events.unsubscribe("ping", recorder)
        self.events.publish("ping")
        self.assertEqual(recorder.received, [])
        self.assertFalse(self.events.has_subscribers("ping"))

    def test_failing_listener_does_not_block_others(self):
        def broken(event_type, data):
            raise RuntimeError("boom")
        recorder = EventRecorder(self.events)
        self.events.subscribe("ping", broken)
        self.events.subscribe("ping", recorder)
        self.events.publish("ping", "data")
        self.assertEqual(recorder.of("ping"), ["data"])

    def test_listener_may_unsubscribe_during_publish(self):
        calls = []

        def once(event_type, data):
            calls.append(data)
            self.events.unsubscribe("ping", once)
        self.events.subscribe("ping", once)
        self.events.publish("ping", 1)
        self.events.publish("ping", 2)
        self.assertEqual(calls, [1])

    def test_history(self):
        self.events.publish("ping", 1)
        self.events.publish("ping", 2)
        self.assertEqual(self.events.get_last_event_data("ping"), 2)
        self.assertEqual(self.events.get_last_event_data("pong", "none"), "none")
        self.events.clear_history({"ping"})
        self.assertIsNone(self.events.get_last_event_data("ping"))


class TestLogLevel(unittest.TestCase):

    def tearDown(self):
        Logger.set_level(LogLevel.INFO)

    def test_parse_names(self):
        self.assertEqual(LogLevel.parse("debug"), LogLevel.DEBUG)
        self.assertEqual(LogLevel.parse("WARNING"), LogLevel.WARNING)
        self.assertEqual(LogLevel.parse("warn"), LogLevel.WARNING)
        self.assertEqual(LogLevel.parse(LogLevel.ERROR), LogLevel.ERROR)
        with self.assertRaises(ValueError):
            LogLevel.parse("loud")

    def test_set_level_filters(self):
        Logger.set_level("error")
        self.assertEqual(Logger.get_level(), LogLevel.ERROR)
        self.assertFalse(Logger.is_enabled(LogLevel.INFO))
        self.assertTrue(Logger.is_enabled(LogLevel.CRITICAL))


if __name__ == '__main__':
    unittest.main()
