"""Actions defined by the dashboard screens."""

from __future__ import annotations

from dataclasses import dataclass

from shuttle_tui.action import Action, register_action
from shuttle_tui.models import PanelData


@register_action
@dataclass(frozen=True)
class Increment(Action):
    pass


@register_action
@dataclass(frozen=True)
class Decrement(Action):
    pass


@register_action
@dataclass(frozen=True)
class SelectNext(Action):
    pass


@register_action
@dataclass(frozen=True)
class SelectPrevious(Action):
    pass


@register_action
@dataclass(frozen=True)
class SelectFirst(Action):
    pass


@register_action
@dataclass(frozen=True)
class SelectLast(Action):
    pass


@dataclass(frozen=True)
class ProjectsLoaded(Action):
    data: PanelData


@dataclass(frozen=True)
class DeploymentsLoaded(Action):
    data: PanelData
