"""Resolution of single keys and multi-key chords against a keymap."""

from __future__ import annotations

from collections.abc import Mapping

from shuttle_tui.action import Action
from shuttle_tui.keys import KeyEvent, sequence_to_string
from shuttle_tui.logging_config import get_logger

logger = get_logger("chords")

Keymap = Mapping[tuple[KeyEvent, ...], Action]


class ChordMatcher:
    """Buffers key presses until they form a bound chord.

    The buffer is only cleared by ``reset()``, which the orchestrator calls
    on every tick, so a chord has to be completed within one tick interval.
    """

    def __init__(self, buffer: list[KeyEvent] | None = None):
        self.buffer: list[KeyEvent] = buffer if buffer is not None else []

    def match(self, key: KeyEvent, keymap: Keymap | None) -> Action | None:
        if keymap is None:
            return None

        action = keymap.get((key,))
        if action is not None:
            logger.info("Got action: %s (%s)", action, sequence_to_string((key,)))
            return action

        self.buffer.append(key)
        chord = tuple(self.buffer)
        action = keymap.get(chord)
        if action is not None:
            logger.info("Got action: %s (%s)", action, sequence_to_string(chord))
        return action

    def reset(self) -> None:
        self.buffer.clear()
