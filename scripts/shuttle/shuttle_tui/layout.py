"""Screen regions and responsive layout mode selection by terminal width."""

from __future__ import annotations

from shuttle_tui.frame import Rect

TAB_BAR_HEIGHT = 3


def select_layout_mode(width: int) -> str:
    if width < 80:
        return "narrow"
    if width < 120:
        return "medium"
    return "wide"


def tab_bar_area(area: Rect) -> Rect:
    return area.split_top(TAB_BAR_HEIGHT)[0]


def body_area(area: Rect) -> Rect:
    return area.split_top(TAB_BAR_HEIGHT)[1]
