# tests/test_watcher.py
import unittest

from panelkit.watcher import ManualScheduler, StateWatcher


class TestStateWatcher(unittest.TestCase):
    def setUp(self):
        self.state = "menu"
        self.scheduler = ManualScheduler()
        self.watcher = StateWatcher(lambda: self.state, self.scheduler)
        self.calls = []

    def test_runs_on_entering_a_state(self):
        self.watcher.on_state("game", lambda: self.calls.append("game"))
        self.watcher.on_state("menu", lambda: self.calls.append("menu"))
        self.watcher.start()
        self.assertEqual(self.calls, ["menu"])

        self.scheduler.tick()
        self.assertEqual(self.calls, ["menu"])

        self.state = "game"
        self.scheduler.tick()
        self.scheduler.tick()
        self.assertEqual(self.calls, ["menu", "game"])
        self.assertEqual(self.watcher.state, "game")

    def test_reentering_fires_again(self):
        self.watcher.on_state("menu", lambda: self.calls.append("menu"))
        self.watcher.start()
        self.state = "game"
        self.scheduler.tick()
        self.state = "menu"
        self.scheduler.tick()
        self.assertEqual(self.calls, ["menu", "menu"])

    def test_several_callbacks_in_order(self):
        self.watcher.on_state("menu", lambda: self.calls.append(1))
        self.watcher.on_state("menu", lambda: self.calls.append(2))
        self.watcher.start()
        self.assertEqual(self.calls, [1, 2])

    def test_stop(self):
        self.watcher.start()
        self.watcher.stop()
        self.assertEqual(self.scheduler.tick(), 1)
        self.assertEqual(self.scheduler.queue, [])

    def test_start_twice_schedules_once(self):
        self.watcher.start()
        self.watcher.start()
        self.assertEqual(len(self.scheduler.queue), 1)

    def test_failing_callback_is_logged(self):
        def broken():
            raise ValueError("boom")

        self.watcher.on_state("menu", broken)
        self.watcher.on_state("menu", lambda: self.calls.append("after"))
        with self.assertLogs("panelkit.watcher", "ERROR"):
            self.watcher.start()
        self.assertEqual(self.calls, ["after"])
        self.assertEqual(len(self.scheduler.queue), 1)


if __name__ == "__main__":
    unittest.main()
