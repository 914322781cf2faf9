"""Tab bar shown above every screen."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from shuttle_tui.action import Action, NextTab, PreviousTab
from shuttle_tui.components import Component
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.layout import tab_bar_area
from shuttle_tui.tab import ORDER, Tab

DIVIDER = " • "


class Tabs(Component):
    def __init__(self):
        self.tab = Tab.default()

    def update(self, action: Action) -> Action | None:
        if isinstance(action, NextTab):
            self.tab = self.tab.next()
        elif isinstance(action, PreviousTab):
            self.tab = self.tab.previous()
        return None

    def titles(self) -> Text:
        text = Text(style="white")
        for index, tab in enumerate(ORDER):
            if index:
                text.append(DIVIDER)
            text.append(str(tab), style="bold yellow" if tab == self.tab else "white")
        return text

    def draw(self, frame: Frame, area: Rect) -> None:
        frame.render(Panel(self.titles(), title="Tabs", title_align="left"), tab_bar_area(area))
