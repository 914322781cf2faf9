"""Component capability set shared by every screen, plus panel helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shuttle_tui.action import Action
from shuttle_tui.terminal import Event, Key

if TYPE_CHECKING:
    from shuttle_tui.bus import ActionSender
    from shuttle_tui.config import Config
    from shuttle_tui.frame import Frame, Rect
    from shuttle_tui.keys import KeyEvent
    from shuttle_tui.tab import Tab

STATUS_BORDER = {
    "ok": "cyan",
    "warn": "yellow",
    "error": "red",
}


class Component:
    """A unit of UI that handles events, reacts to actions and draws itself.

    ``handle_events`` and ``update`` return at most one follow-up action and
    must not block; slow work belongs on a worker thread that reports back
    through ``send``.
    """

    action_tx: ActionSender | None = None
    config: Config | None = None

    def register_action_handler(self, tx: ActionSender) -> None:
        self.action_tx = tx

    def register_config_handler(self, config: Config) -> None:
        self.config = config

    def init(self) -> None:
        pass

    def teardown(self) -> None:
        """Release resources; called once when the loop exits."""

    def assigned_tab(self) -> Tab | None:
        """Tab this component belongs to; ``None`` means always visible."""
        return None

    def handle_events(self, event: Event | None) -> Action | None:
        if isinstance(event, Key):
            return self.handle_key_events(event.key)
        return None

    def handle_key_events(self, key: KeyEvent) -> Action | None:
        return None

    def update(self, action: Action) -> Action | None:
        return None

    def draw(self, frame: Frame, area: Rect) -> None:
        raise NotImplementedError

    def send(self, action: Action) -> None:
        if self.action_tx is None:
            raise RuntimeError(f"{type(self).__name__} has no action handler registered")
        self.action_tx.send(action)


def border_for(status: str) -> str:
    return STATUS_BORDER.get(status, "cyan")


def empty_panel(title: str, message: str = "No data") -> Panel:
    return Panel(Text(message, style="dim"), title=f"[bold]{title}[/bold]", border_style="cyan")


def panel_from_table(title: str, status: str, table: Table) -> Panel:
    return Panel(table, title=f"[bold]{title}[/bold]", border_style=border_for(status))
