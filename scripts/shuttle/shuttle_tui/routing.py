"""Tab-scoped component visibility."""

from __future__ import annotations

from collections.abc import Iterable

from shuttle_tui.components import Component
from shuttle_tui.tab import Tab


def is_visible(component: Component, tab: Tab) -> bool:
    assigned = component.assigned_tab()
    return assigned is None or assigned == tab


def visible_components(components: Iterable[Component], tab: Tab) -> list[Component]:
    return [c for c in components if is_visible(c, tab)]
