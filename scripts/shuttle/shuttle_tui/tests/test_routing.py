from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from shuttle_tui.routing import is_visible, visible_components  # noqa: E402
from shuttle_tui.tab import ORDER  # noqa: E402
from shuttle_tui.tests.support import Recorder  # noqa: E402


class RoutingTests(unittest.TestCase):
    def test_visibility_for_every_tab(self):
        for active in ORDER:
            for assigned in (None, *ORDER):
                with self.subTest(active=active, assigned=assigned):
                    expected = assigned is None or assigned == active
                    self.assertEqual(is_visible(Recorder(assigned), active), expected)

    def test_visible_components_keep_registry_order(self):
        components = [Recorder(tab) for tab in (None, *ORDER, None)]
        for active in ORDER:
            visible = visible_components(components, active)
            self.assertEqual(visible, [c for c in components if c.tab in (None, active)])


if __name__ == "__main__":
    unittest.main()
