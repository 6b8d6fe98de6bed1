"""Tests for the EventBus observer registry."""

import unittest

from crawlkit import events
from crawlkit.events import EventBus


class TestEventBus(unittest.TestCase):
    """Verify subscription, emission and cleanup."""

    def test_emit_calls_listeners_in_order(self):
        """Listeners receive the payload in registration order."""
        bus = EventBus()
        seen = []
        bus.on(events.JOB_FAIL, lambda err, job: seen.append(("a", err, job)))
        bus.on(events.JOB_FAIL, lambda err, job: seen.append(("b", err, job)))
        self.assertTrue(bus.emit(events.JOB_FAIL, "e", "j"))
        self.assertEqual(seen, [("a", "e", "j"), ("b", "e", "j")])

    def test_emit_without_listener_returns_false(self):
        """Emitting an event nobody listens to is harmless."""
        self.assertFalse(EventBus().emit(events.SCRAPER_START))

    def test_off_removes_listener(self):
        """A removed listener is no longer called."""
        bus = EventBus()
        seen = []
        fn = seen.append
        bus.on(events.SCRAPER_END, fn)
        bus.off(events.SCRAPER_END, fn)
        bus.emit(events.SCRAPER_END, "success")
        self.assertEqual(seen, [])

    def test_remove_all_listeners(self):
        """Teardown detaches every observer."""
        bus = EventBus()
        for event in events.EVENTS:
            bus.on(event, lambda *args: None)
        bus.remove_all_listeners()
        for event in events.EVENTS:
            self.assertEqual(bus.listener_count(event), 0)

    def test_listener_error_propagates(self):
        """Listener exceptions reach the emitter."""
        bus = EventBus()

        def boom():
            raise RuntimeError("listener")

        bus.on(events.SCRAPER_START, boom)
        with self.assertRaises(RuntimeError):
            bus.emit(events.SCRAPER_START)


if __name__ == "__main__":
    unittest.main()
