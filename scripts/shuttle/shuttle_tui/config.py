"""Configuration snapshot: keybindings per tab, rates and settings.

The built-in defaults are merged with ``config.json`` from the config
directory and then with an explicit ``--config`` file. User keybindings
replace default bindings for the same chord; ``null`` removes a binding.
The resulting ``Config`` is read-only and shared by every component.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

# Registers the screen actions so they can be bound by name.
import shuttle_tui.components.actions  # noqa: F401
from shuttle_tui.action import Action, action_from_name
from shuttle_tui.errors import ConfigError
from shuttle_tui.keys import KeyEvent, parse_key_sequence
from shuttle_tui.tab import Tab

CONFIG_DIR_ENV = "SHUTTLE_TUI_CONFIG"
DATA_DIR_ENV = "SHUTTLE_TUI_DATA"
CONFIG_FILE_NAME = "config.json"

Keymap = Mapping[tuple[KeyEvent, ...], Action]

_GLOBAL_BINDINGS = {
    "<q>": "Quit",
    "<ctrl-c>": "Quit",
    "<ctrl-d>": "Quit",
    "<ctrl-z>": "Suspend",
    "<tab>": "NextTab",
    "<backtab>": "PreviousTab",
}

_LIST_BINDINGS = {
    "<j>": "SelectNext",
    "<down>": "SelectNext",
    "<k>": "SelectPrevious",
    "<up>": "SelectPrevious",
    "<g><g>": "SelectFirst",
    "<G>": "SelectLast",
    "<r>": "Refresh",
}

DEFAULT_CONFIG: dict[str, Any] = {
    "tick_rate": 4.0,
    "frame_rate": 30.0,
    "keybindings": {
        "Home": {
            **_GLOBAL_BINDINGS,
            "<?>": "ToggleShowHelp",
            "<j>": "Increment",
            "<k>": "Decrement",
        },
        "Projects": {**_GLOBAL_BINDINGS, **_LIST_BINDINGS},
        "Deployments": {**_GLOBAL_BINDINGS, **_LIST_BINDINGS},
    },
    "settings": {
        "projects_command": None,
        "deployments_command": None,
    },
}


@dataclass(frozen=True)
class Config:
    keybindings: Mapping[Tab, Keymap] = field(default_factory=lambda: MappingProxyType({}))
    settings: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    tick_rate: float = 4.0
    frame_rate: float = 30.0
    config_dir: Path = field(default_factory=lambda: default_config_dir())
    data_dir: Path = field(default_factory=lambda: default_data_dir())

    def keymap(self, tab: Tab) -> Keymap | None:
        return self.keybindings.get(tab)


def default_config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "shuttle-tui"


def default_data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "shuttle-tui"


def load_user_config(path: str | Path | None, required: bool = True) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        if required:
            raise ConfigError(f"config path not found: {config_path}")
        return {}

    try:
        payload = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON config {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"unreadable config {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"config {config_path} must be a JSON object")
    return payload


def build_keymap(raw: Mapping[str, Any]) -> dict[Tab, dict[tuple[KeyEvent, ...], Action | None]]:
    """Parse ``{"Home": {"<q>": "Quit"}}``; ``None`` actions mark removals."""
    if not isinstance(raw, Mapping):
        raise ConfigError("keybindings must be an object keyed by tab name")

    keymaps: dict[Tab, dict[tuple[KeyEvent, ...], Action | None]] = {}
    for tab_name, bindings in raw.items():
        tab = Tab.parse(tab_name)
        if not isinstance(bindings, Mapping):
            raise ConfigError(f"keybindings for {tab} must be an object")
        keymap = keymaps.setdefault(tab, {})
        for sequence, action_name in bindings.items():
            chord = parse_key_sequence(sequence)
            keymap[chord] = None if action_name is None else action_from_name(action_name)
    return keymaps


def merge_keymaps(*layers: Mapping[Tab, Mapping]) -> Mapping[Tab, Keymap]:
    merged: dict[Tab, dict] = {}
    for layer in layers:
        for tab, bindings in layer.items():
            keymap = merged.setdefault(tab, {})
            for chord, action in bindings.items():
                if action is None:
                    keymap.pop(chord, None)
                else:
                    keymap[chord] = action
    return MappingProxyType({tab: MappingProxyType(keymap) for tab, keymap in merged.items()})


def _rate(value: Any, name: str) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number: {value!r}") from exc
    if rate <= 0:
        raise ConfigError(f"{name} must be positive: {rate}")
    return rate


def load_config(
    path: str | Path | None = None,
    tick_rate: float | None = None,
    frame_rate: float | None = None,
) -> Config:
    config_dir = default_config_dir()
    layers = [
        DEFAULT_CONFIG,
        load_user_config(config_dir / CONFIG_FILE_NAME, required=False),
        load_user_config(path),
    ]

    keymaps = merge_keymaps(*(build_keymap(layer.get("keybindings", {})) for layer in layers))

    settings: dict[str, Any] = {}
    rates = {"tick_rate": DEFAULT_CONFIG["tick_rate"], "frame_rate": DEFAULT_CONFIG["frame_rate"]}
    for layer in layers:
        layer_settings = layer.get("settings", {})
        if not isinstance(layer_settings, Mapping):
            raise ConfigError("settings must be an object")
        settings.update(layer_settings)
        for name in rates:
            if name in layer:
                rates[name] = layer[name]

    if tick_rate is not None:
        rates["tick_rate"] = tick_rate
    if frame_rate is not None:
        rates["frame_rate"] = frame_rate

    data_dir = settings.get("data_dir")
    return Config(
        keybindings=keymaps,
        settings=MappingProxyType(settings),
        tick_rate=_rate(rates["tick_rate"], "tick_rate"),
        frame_rate=_rate(rates["frame_rate"], "frame_rate"),
        config_dir=config_dir,
        data_dir=Path(data_dir).expanduser() if data_dir else default_data_dir(),
    )
