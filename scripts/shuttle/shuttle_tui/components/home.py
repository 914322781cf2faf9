"""Home screen: greeting, a counter and the keybinding help overlay."""

from __future__ import annotations

from rich.align import Align
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shuttle_tui.action import Action, ToggleShowHelp
from shuttle_tui.components import Component
from shuttle_tui.components.actions import Decrement, Increment
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.keys import sequence_to_string
from shuttle_tui.layout import body_area
from shuttle_tui.tab import Tab


class Home(Component):
    def __init__(self):
        self.show_help = False
        self.counter = 0

    def assigned_tab(self) -> Tab | None:
        return Tab.HOME

    def update(self, action: Action) -> Action | None:
        if isinstance(action, ToggleShowHelp):
            self.show_help = not self.show_help
        elif isinstance(action, Increment):
            self.counter += 1
        elif isinstance(action, Decrement):
            self.counter = max(0, self.counter - 1)
        return None

    def help_rows(self) -> list[tuple[str, str]]:
        if self.config is None:
            return []
        keymap = self.config.keybindings.get(Tab.HOME, {})
        rows = [(sequence_to_string(chord), action.name) for chord, action in keymap.items()]
        return sorted(rows, key=lambda row: (row[1], row[0]))

    def help_panel(self) -> Panel:
        table = Table(box=None, expand=True, pad_edge=False)
        table.add_column("Key", style="bold", no_wrap=True, ratio=1)
        table.add_column("Action", ratio=4)
        for keys, action in self.help_rows():
            table.add_row(keys, action)
        return Panel(table, title="[bold]Key Bindings[/bold]", border_style="yellow", padding=(1, 2))

    def draw(self, frame: Frame, area: Rect) -> None:
        body = Text.assemble(
            ("Shuttle dashboard\n\n", "bold"),
            ("Counter: ", "dim"),
            (str(self.counter), "bold cyan"),
            ("\n\nPress ? for help", "dim"),
        )
        frame.render(Panel(Align.center(body, vertical="middle"), border_style="cyan"), body_area(area))

        if self.show_help:
            overlay = frame.size().inner(horizontal=4, vertical=2)
            frame.clear(overlay)
            frame.render(self.help_panel(), overlay)
