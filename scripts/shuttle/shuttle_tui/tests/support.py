"""Scripted terminal and recording component used by the loop tests."""

from __future__ import annotations

import io
from collections import deque
from types import MappingProxyType

from rich.console import Console

from shuttle_tui import terminal as events
from shuttle_tui.action import action_from_name
from shuttle_tui.components import Component
from shuttle_tui.config import Config
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.keys import KeyEvent, parse_key_sequence
from shuttle_tui.tab import Tab


def make_console(width: int = 80, height: int = 24) -> Console:
    return Console(file=io.StringIO(), width=width, height=height, color_system=None)


def make_config(bindings: dict[Tab, dict[str, str]], **kwargs) -> Config:
    keybindings = {
        tab: MappingProxyType({parse_key_sequence(seq): action_from_name(name) for seq, name in keymap.items()})
        for tab, keymap in bindings.items()
    }
    return Config(keybindings=MappingProxyType(keybindings), **kwargs)


def key(code: str, *modifiers: str) -> events.Key:
    return events.Key(KeyEvent.of(code, *modifiers))


class FakeTerminal:
    """Replays a list of events, then reports Quit forever."""

    def __init__(self, script=(), area: Rect = Rect(0, 0, 80, 24)):
        self.script = deque(script)
        self.area = area
        self.tick_hz: float | None = None
        self.frame_hz: float | None = None
        self.entered = 0
        self.stopped = False
        self.exited = False
        self.suspended = False
        self.draws: list[tuple[Rect, Frame]] = []

    def tick_rate(self, hz: float) -> None:
        self.tick_hz = hz

    def frame_rate(self, hz: float) -> None:
        self.frame_hz = hz

    def enter(self) -> None:
        self.entered += 1
        self.script.appendleft(events.Init())

    def stop(self) -> None:
        self.stopped = True

    def exit(self) -> None:
        self.stopped = True
        self.exited = True

    def suspend(self) -> None:
        self.suspended = True

    async def next(self) -> events.Event:
        if self.script:
            return self.script.popleft()
        return events.Quit()

    def size(self) -> Rect:
        return self.area

    def resize(self, area: Rect) -> None:
        self.area = area

    def draw(self, callback) -> None:
        frame = Frame(make_console(self.area.width, self.area.height), self.area)
        try:
            callback(frame)
        finally:
            self.draws.append((self.area, frame))


class TerminalFactory:
    """Hands out the given terminals in order, one per ``enter``."""

    def __init__(self, *terminals: FakeTerminal):
        self.pending = deque(terminals)
        self.created: list[FakeTerminal] = []

    def __call__(self) -> FakeTerminal:
        terminal = self.pending.popleft() if self.pending else FakeTerminal()
        self.created.append(terminal)
        return terminal


class Recorder(Component):
    def __init__(self, tab: Tab | None = None, reply=None):
        self.tab = tab
        self.reply = reply or {}
        self.events = []
        self.actions = []
        self.areas = []
        self.initialized = 0
        self.torn_down = 0

    def init(self) -> None:
        self.initialized += 1

    def teardown(self) -> None:
        self.torn_down += 1

    def assigned_tab(self) -> Tab | None:
        return self.tab

    def handle_events(self, event):
        self.events.append(event)
        return None

    def update(self, action):
        self.actions.append(action)
        return self.reply.get(type(action))

    def draw(self, frame: Frame, area: Rect) -> None:
        self.areas.append(area)
