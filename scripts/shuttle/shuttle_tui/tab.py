"""Dashboard tabs and cyclic tab navigation."""

from __future__ import annotations

from enum import Enum

from shuttle_tui.errors import ConfigError


class Tab(Enum):
    HOME = "Home"
    PROJECTS = "Projects"
    DEPLOYMENTS = "Deployments"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def default(cls) -> Tab:
        return cls.HOME

    @classmethod
    def parse(cls, name: str) -> Tab:
        text = str(name).strip().lower()
        for tab in ORDER:
            if tab.value.lower() == text or tab.name.lower() == text:
                return tab
        raise ConfigError(f"unknown tab: {name}")

    def next(self) -> Tab:
        return ORDER[(ORDER.index(self) + 1) % len(ORDER)]

    def previous(self) -> Tab:
        return ORDER[(ORDER.index(self) - 1) % len(ORDER)]


# Display and cycling order of the tab bar.
ORDER: tuple[Tab, ...] = (Tab.HOME, Tab.PROJECTS, Tab.DEPLOYMENTS)
