"""Action messages exchanged between the orchestrator and components.

Every action is a frozen dataclass deriving from ``Action``. Equality is
structural and includes the concrete class, so ``Resize(80, 24)`` equals
another ``Resize(80, 24)`` but never an ``Error``. Components add their own
variants by subclassing ``Action``; parameterless variants decorated with
``register_action`` can be bound to keys in the config file by class name.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from shuttle_tui.errors import ConfigError

ACTION_REGISTRY: dict[str, type[Action]] = {}


@dataclass(frozen=True)
class Action:
    @property
    def name(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        values = [getattr(self, f.name) for f in fields(self)]
        if not values:
            return self.name
        return f"{self.name}({', '.join(repr(v) for v in values)})"


def register_action(cls: type[Action]) -> type[Action]:
    if fields(cls):
        raise TypeError(f"{cls.__name__} takes arguments and cannot be bound to a key")
    ACTION_REGISTRY[cls.__name__] = cls
    return cls


def action_from_name(name: str) -> Action:
    cls = ACTION_REGISTRY.get(str(name).strip())
    if cls is None:
        raise ConfigError(f"unknown action: {name}")
    return cls()


@register_action
@dataclass(frozen=True)
class Tick(Action):
    pass


@register_action
@dataclass(frozen=True)
class Render(Action):
    pass


@dataclass(frozen=True)
class Resize(Action):
    width: int
    height: int


@register_action
@dataclass(frozen=True)
class Quit(Action):
    pass


@register_action
@dataclass(frozen=True)
class Suspend(Action):
    pass


@register_action
@dataclass(frozen=True)
class Resume(Action):
    pass


@register_action
@dataclass(frozen=True)
class NextTab(Action):
    pass


@register_action
@dataclass(frozen=True)
class PreviousTab(Action):
    pass


@register_action
@dataclass(frozen=True)
class ToggleShowHelp(Action):
    pass


@register_action
@dataclass(frozen=True)
class Refresh(Action):
    pass


@dataclass(frozen=True)
class Error(Action):
    message: str


NOISY_ACTIONS = (Tick, Render)


def is_noisy(action: Any) -> bool:
    """Tick and Render fire constantly and are kept out of debug logs."""
    return isinstance(action, NOISY_ACTIONS)
