from __future__ import annotations

import threading
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from shuttle_tui.action import Error, Quit, Render, Resize, Tick, is_noisy  # noqa: E402
from shuttle_tui.bus import ActionBus  # noqa: E402
from shuttle_tui.errors import ChannelError  # noqa: E402


class ActionBusTests(unittest.TestCase):
    def test_fifo(self):
        bus = ActionBus()
        tx = bus.sender()
        tx.send(Tick())
        tx.clone().send(Resize(10, 5))
        self.assertEqual(list(bus.drain()), [Tick(), Resize(10, 5)])
        self.assertIsNone(bus.try_recv())

    def test_drain_includes_actions_sent_while_draining(self):
        bus = ActionBus()
        bus.send(Tick())
        seen = []
        for action in bus.drain():
            seen.append(action)
            if isinstance(action, Tick):
                bus.send(Quit())
        self.assertEqual(seen, [Tick(), Quit()])

    def test_send_after_close_raises(self):
        bus = ActionBus()
        tx = bus.sender()
        bus.close()
        self.assertTrue(bus.closed)
        with self.assertRaises(ChannelError):
            tx.send(Quit())

    def test_worker_threads_can_send(self):
        bus = ActionBus()
        tx = bus.sender()
        threads = [threading.Thread(target=tx.send, args=(Error(str(n)),)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(bus), 8)
        self.assertEqual({a.message for a in bus.drain()}, {str(n) for n in range(8)})


class ActionTests(unittest.TestCase):
    def test_structural_equality(self):
        self.assertEqual(Resize(80, 24), Resize(80, 24))
        self.assertNotEqual(Resize(80, 24), Resize(24, 80))
        self.assertNotEqual(Tick(), Render())

    def test_noisy_actions(self):
        self.assertTrue(is_noisy(Tick()))
        self.assertTrue(is_noisy(Render()))
        self.assertFalse(is_noisy(Quit()))

    def test_string_form(self):
        self.assertEqual(str(Quit()), "Quit")
        self.assertEqual(str(Resize(80, 24)), "Resize(80, 24)")


if __name__ == "__main__":
    unittest.main()
