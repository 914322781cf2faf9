"""Dashboard orchestrator and command-line entrypoint.

``App.run`` owns the terminal, the action bus and the component registry.
Each loop iteration waits for one terminal event, turns it into actions,
then drains the bus completely before waiting again.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from rich.console import Console

from shuttle_tui import __version__, terminal as events
from shuttle_tui.action import (
    Action,
    Error,
    NextTab,
    PreviousTab,
    Quit,
    Render,
    Resize,
    Resume,
    Suspend,
    Tick,
    is_noisy,
)
from shuttle_tui.bus import ActionBus
from shuttle_tui.chords import ChordMatcher
from shuttle_tui.collectors.service import collect_deployments, collect_projects
from shuttle_tui.components import Component
from shuttle_tui.components.deployments import Deployments
from shuttle_tui.components.home import Home
from shuttle_tui.components.projects import Projects
from shuttle_tui.components.tabs import Tabs
from shuttle_tui.config import Config, load_config
from shuttle_tui.errors import ChannelError, IoError
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.keys import KeyEvent
from shuttle_tui.logging_config import LOG_FILE_NAME, get_logger, install_panic_hook, setup_logging
from shuttle_tui.routing import visible_components
from shuttle_tui.tab import Tab
from shuttle_tui.terminal import Terminal

logger = get_logger("app")


@dataclass
class AppState:
    should_quit: bool = False
    should_suspend: bool = False
    active_tab: Tab = field(default_factory=Tab.default)
    chord_buffer: list[KeyEvent] = field(default_factory=list)


def default_components() -> list[Component]:
    return [Tabs(), Home(), Projects(), Deployments()]


class App:
    def __init__(
        self,
        config: Config,
        components: Iterable[Component] | None = None,
        terminal_factory: Callable[[], Terminal] = Terminal,
    ):
        self.config = config
        self.tick_rate = config.tick_rate
        self.frame_rate = config.frame_rate
        self.components = list(components) if components is not None else default_components()
        self.terminal_factory = terminal_factory
        self.state = AppState()
        self.chords = ChordMatcher(self.state.chord_buffer)
        self.bus = ActionBus()
        self.terminal: Terminal | None = None

    def visible_components(self) -> list[Component]:
        return visible_components(self.components, self.state.active_tab)

    def send(self, action: Action) -> None:
        self.bus.send(action)

    async def run(self) -> None:
        self.open_terminal()
        try:
            tx = self.bus.sender()
            for component in self.components:
                component.register_action_handler(tx.clone())
            for component in self.components:
                component.register_config_handler(self.config)
            for component in self.components:
                component.init()

            while True:
                event = await self.terminal.next()
                self.handle_event(event)
                self.drain()

                if self.state.should_suspend:
                    self.terminal.suspend()
                    self.send(Resume())
                    self.terminal.stop()
                    self.open_terminal()
                elif self.state.should_quit:
                    self.terminal.stop()
                    break
        finally:
            self.bus.close()
            try:
                for component in self.components:
                    component.teardown()
            finally:
                self.restore_terminal()

    def open_terminal(self) -> None:
        self.terminal = self.terminal_factory()
        self.terminal.tick_rate(self.tick_rate)
        self.terminal.frame_rate(self.frame_rate)
        self.terminal.enter()

    def restore_terminal(self) -> None:
        if self.terminal is not None:
            self.terminal.exit()

    def handle_event(self, event: events.Event) -> None:
        if isinstance(event, (events.Quit, events.Closed)):
            self.send(Quit())
        elif isinstance(event, events.Tick):
            self.send(Tick())
        elif isinstance(event, events.Render):
            self.send(Render())
        elif isinstance(event, events.Resize):
            self.send(Resize(event.width, event.height))
        elif isinstance(event, events.Error):
            self.send(Error(event.message))
        elif isinstance(event, events.Key):
            action = self.chords.match(event.key, self.config.keymap(self.state.active_tab))
            if action is not None:
                self.send(action)

        for component in self.visible_components():
            try:
                action = component.handle_events(event)
            except Exception as exc:
                logger.exception("%s failed to handle %s", type(component).__name__, event.name)
                action = Error(f"Failed to handle event: {exc}")
            if action is not None:
                self.send(action)

    def drain(self) -> None:
        for action in self.bus.drain():
            if not is_noisy(action):
                logger.debug("%s", action)
            self.apply(action)
            for component in self.visible_components():
                follow_up = component.update(action)
                if follow_up is not None:
                    self.send(follow_up)

    def apply(self, action: Action) -> None:
        if isinstance(action, Tick):
            self.chords.reset()
        elif isinstance(action, Quit):
            self.state.should_quit = True
        elif isinstance(action, Suspend):
            self.state.should_suspend = True
        elif isinstance(action, Resume):
            self.state.should_suspend = False
        elif isinstance(action, Resize):
            self.terminal.resize(Rect(0, 0, action.width, action.height))
            self.render()
        elif isinstance(action, Render):
            self.render()
        elif isinstance(action, NextTab):
            self.state.active_tab = self.state.active_tab.next()
        elif isinstance(action, PreviousTab):
            self.state.active_tab = self.state.active_tab.previous()
        elif isinstance(action, Error):
            logger.error("%s", action.message)

    def render(self) -> None:
        components = self.visible_components()

        def draw(frame: Frame) -> None:
            for component in components:
                try:
                    component.draw(frame, frame.size())
                except Exception as exc:
                    logger.exception("%s failed to draw", type(component).__name__)
                    self.send(Error(f"Failed to draw: {exc}"))

        self.terminal.draw(draw)


def _json_output(config: Config) -> str:
    payload = {
        "collected_at": datetime.now(timezone.utc).isoformat(),
        "projects": collect_projects(config.settings, config.data_dir).to_dict(),
        "deployments": collect_deployments(config.settings, config.data_dir).to_dict(),
    }
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Shuttle terminal dashboard")
    parser.add_argument("-t", "--tick-rate", type=float, help="Application ticks per second")
    parser.add_argument("-f", "--frame-rate", type=float, help="Frames rendered per second")
    parser.add_argument("--config", help="Optional JSON config file with keybindings and settings")
    parser.add_argument("--log-level", help="Log level for the log file (default: SHUTTLE_TUI_LOG_LEVEL or INFO)")
    parser.add_argument("--json", action="store_true", help="Print projects and deployments as JSON and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    err_console = Console(stderr=True)

    try:
        config = load_config(args.config, tick_rate=args.tick_rate, frame_rate=args.frame_rate)
        setup_logging(args.log_level, config.data_dir / LOG_FILE_NAME)
    except (ValueError, OSError) as exc:
        err_console.print(f"[bold red]error:[/bold red] {exc}")
        return 1

    if args.json:
        print(_json_output(config))
        return 0

    app = App(config)
    install_panic_hook(app.restore_terminal, err_console)
    try:
        asyncio.run(app.run())
    except (IoError, ChannelError) as exc:
        logger.error("dashboard stopped: %s", exc)
        err_console.print(f"[bold red]error:[/bold red] {exc}")
        return 1
    logger.info("dashboard exited")
    return 0

