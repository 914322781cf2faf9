from __future__ import annotations

import unittest
from pathlib import Path
import sys
import threading

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from shuttle_tui.action import NextTab, PreviousTab, Refresh, Tick, ToggleShowHelp  # noqa: E402
from shuttle_tui.bus import ActionBus  # noqa: E402
from shuttle_tui.components import Component  # noqa: E402
from shuttle_tui.components.actions import (  # noqa: E402
    Decrement,
    Increment,
    ProjectsLoaded,
    SelectFirst,
    SelectLast,
    SelectNext,
    SelectPrevious,
)
from shuttle_tui.components.deployments import Deployments  # noqa: E402
from shuttle_tui.components.home import Home  # noqa: E402
from shuttle_tui.components.projects import Projects  # noqa: E402
from shuttle_tui.components.tabs import Tabs  # noqa: E402
from shuttle_tui.frame import Frame, Rect  # noqa: E402
from shuttle_tui.models import PanelData  # noqa: E402
from shuttle_tui.tab import Tab  # noqa: E402
from shuttle_tui.tests.support import key, make_config, make_console  # noqa: E402


def draw(component: Component, width: int = 80, height: int = 24) -> str:
    frame = Frame(make_console(width, height), Rect(0, 0, width, height))
    component.draw(frame, frame.size())
    return "\n".join(frame.text_lines())


def projects_data(*names: str) -> PanelData:
    items = [{"id": f"p{index}", "name": name, "state": "ready", "age": "1m ago"} for index, name in enumerate(names)]
    return PanelData(key="projects", title="Projects", items=items, meta={"count": len(items)})


class ComponentDefaultsTests(unittest.TestCase):
    def test_defaults(self):
        component = Component()
        self.assertIsNone(component.assigned_tab())
        self.assertIsNone(component.handle_events(key("x")))
        self.assertIsNone(component.handle_events(None))
        self.assertIsNone(component.update(Tick()))
        with self.assertRaises(NotImplementedError):
            component.draw(None, Rect(0, 0, 1, 1))

    def test_send_requires_handler(self):
        component = Component()
        with self.assertRaises(RuntimeError):
            component.send(Tick())
        bus = ActionBus()
        component.register_action_handler(bus.sender())
        component.send(Tick())
        self.assertEqual(list(bus.drain()), [Tick()])


class HomeTests(unittest.TestCase):
    def setUp(self):
        self.home = Home()
        self.home.register_config_handler(
            make_config({Tab.HOME: {"<q>": "Quit", "<?>": "ToggleShowHelp", "<g><g>": "Refresh"}})
        )

    def test_toggle_help(self):
        self.home.update(ToggleShowHelp())
        self.assertTrue(self.home.show_help)
        self.home.update(ToggleShowHelp())
        self.assertFalse(self.home.show_help)

    def test_counter_does_not_go_negative(self):
        self.home.update(Increment())
        self.home.update(Increment())
        self.home.update(Decrement())
        self.assertEqual(self.home.counter, 1)
        self.home.update(Decrement())
        self.home.update(Decrement())
        self.assertEqual(self.home.counter, 0)

    def test_help_rows_come_from_home_keymap(self):
        self.assertEqual(
            self.home.help_rows(),
            [("<q>", "Quit"), ("<g><g>", "Refresh"), ("<?>", "ToggleShowHelp")],
        )

    def test_draw(self):
        self.home.update(Increment())
        text = draw(self.home)
        self.assertIn("Shuttle dashboard", text)
        self.assertIn("Counter: 1", text)
        self.assertNotIn("Key Bindings", text)

    def test_draw_help_overlay(self):
        self.home.update(ToggleShowHelp())
        text = draw(self.home)
        self.assertIn("Key Bindings", text)
        self.assertIn("ToggleShowHelp", text)
        self.assertIn("<g><g>", text)


class TabsTests(unittest.TestCase):
    def test_follows_tab_actions(self):
        tabs = Tabs()
        self.assertIsNone(tabs.assigned_tab())
        tabs.update(NextTab())
        self.assertEqual(tabs.tab, Tab.PROJECTS)
        tabs.update(PreviousTab())
        tabs.update(PreviousTab())
        self.assertEqual(tabs.tab, Tab.DEPLOYMENTS)

    def test_titles_highlight_active_tab(self):
        tabs = Tabs()
        tabs.update(NextTab())
        titles = tabs.titles()
        self.assertEqual(titles.plain, "Home • Projects • Deployments")
        highlighted = [titles.plain[span.start : span.end] for span in titles.spans if span.style == "bold yellow"]
        self.assertEqual(highlighted, ["Projects"])

    def test_draw_uses_tab_bar_only(self):
        lines = draw(Tabs()).splitlines()
        self.assertIn("Tabs", lines[0])
        self.assertIn("Home • Projects • Deployments", lines[1])
        self.assertEqual(lines[3].strip(), "")


class ServiceListTests(unittest.TestCase):
    def setUp(self):
        self.calls = 0
        self.result = projects_data("api", "web", "worker")
        self.bus = ActionBus()
        self.gate = threading.Event()
        self.gate.set()

    def collect(self, settings, data_dir):
        self.calls += 1
        self.gate.wait(timeout=5)
        return self.result

    def start(self, component=None) -> Projects:
        component = component or Projects(self.collect)
        component.register_action_handler(self.bus.sender())
        component.register_config_handler(make_config({}))
        component.init()
        executor = component._executor
        self.addCleanup(executor.shutdown)
        return component

    def finish(self, component: Projects) -> list:
        component._pending.result(timeout=5)
        return list(self.bus.drain())

    def test_init_fetches_on_worker_and_reports_loaded(self):
        projects = self.start()
        self.assertTrue(projects.loading)
        actions = self.finish(projects)
        self.assertEqual(actions, [ProjectsLoaded(self.result)])

        projects.update(actions[0])
        self.assertFalse(projects.loading)
        self.assertEqual([item["name"] for item in projects.data.items], ["api", "web", "worker"])

    def test_loaded_result_is_picked_up_when_action_was_missed(self):
        projects = self.start()
        self.finish(projects)
        projects.update(Tick())
        self.assertFalse(projects.loading)
        self.assertEqual(len(projects.data.items), 3)

    def test_collector_failure_becomes_error_panel(self):
        def broken(settings, data_dir):
            raise RuntimeError("boom")

        projects = self.start(Projects(broken))
        actions = self.finish(projects)
        projects.update(actions[0])
        self.assertEqual(projects.data.status, "warn")
        self.assertEqual(projects.data.errors, ["collect failed: boom"])
        self.assertIn("collect failed: boom", draw(projects))

    def test_teardown_stops_worker(self):
        projects = self.start()
        executor = projects._executor
        self.finish(projects)
        projects.teardown()
        self.assertIsNone(projects._executor)
        with self.assertRaises(RuntimeError):
            executor.submit(print)
        projects.update(Tick())
        projects.update(Refresh())
        self.assertFalse(projects.loading)
        self.assertEqual(self.calls, 1)

    def test_refresh_is_ignored_while_loading(self):
        self.gate.clear()
        projects = self.start()
        projects.update(Refresh())
        self.gate.set()
        self.finish(projects)
        self.assertEqual(self.calls, 1)

        projects.update(Refresh())
        self.finish(projects)
        self.assertEqual(self.calls, 2)

    def test_selection(self):
        projects = Projects(self.collect)
        projects.apply(self.result)
        projects.update(SelectPrevious())
        self.assertEqual(projects.selected, 0)
        projects.update(SelectNext())
        projects.update(SelectNext())
        projects.update(SelectNext())
        self.assertEqual(projects.selected, 2)
        projects.update(SelectFirst())
        self.assertEqual(projects.selected, 0)
        projects.update(SelectLast())
        self.assertEqual(projects.selected, 2)

    def test_selection_is_clamped_when_items_shrink(self):
        projects = Projects(self.collect)
        projects.apply(self.result)
        projects.update(SelectLast())
        projects.apply(projects_data("api"))
        self.assertEqual(projects.selected, 0)
        projects.update(SelectNext())
        self.assertEqual(projects.selected, 0)

    def test_visible_window_follows_selection(self):
        projects = Projects(self.collect)
        projects.apply(projects_data(*(f"svc{n}" for n in range(10))))
        self.assertEqual(projects.visible_window(4), range(0, 4))
        projects.selected = 6
        self.assertEqual(projects.visible_window(4), range(3, 7))

    def test_draw_table(self):
        projects = Projects(self.collect)
        projects.apply(self.result)
        text = draw(projects, width=100)
        self.assertIn("Projects (3)", text)
        self.assertIn("Created", text)
        self.assertIn("worker", text)
        self.assertNotIn("Home", text)

    def test_narrow_table_drops_columns(self):
        projects = Projects(self.collect)
        projects.apply(self.result)
        text = draw(projects, width=60)
        self.assertIn("State", text)
        self.assertNotIn("Created", text)

    def test_draw_placeholder_and_errors(self):
        deployments = Deployments(self.collect)
        self.assertIn("No deployments", draw(deployments))
        deployments.apply(PanelData.failed("deployments", "Deployments", "shuttle not installed"))
        self.assertIn("shuttle not installed", draw(deployments))


if __name__ == "__main__":
    unittest.main()
