"""Key events, keybinding syntax and raw terminal input decoding.

Keybindings are written as a sequence of ``<...>`` groups, one per key
press: ``<q>``, ``<ctrl-d>``, ``<g><g>``, ``<alt-enter>``. Printable keys
are case-sensitive (``<G>`` is shift-g); named keys are not.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shuttle_tui.errors import ConfigError

ESC = "\x1b"
MODIFIERS = ("ctrl", "alt", "shift")

NAMED_KEYS = {
    "enter",
    "esc",
    "tab",
    "backtab",
    "backspace",
    "delete",
    "insert",
    "up",
    "down",
    "left",
    "right",
    "home",
    "end",
    "pageup",
    "pagedown",
    *(f"f{n}" for n in range(1, 13)),
}

KEY_ALIASES = {
    "escape": "esc",
    "return": "enter",
    "del": "delete",
    "ins": "insert",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "space": " ",
    "hyphen": "-",
    "minus": "-",
    "lt": "<",
    "gt": ">",
}


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, code: str, *modifiers: str) -> KeyEvent:
        return _normalize(code, set(modifiers))

    def __str__(self) -> str:
        return key_to_string(self)


def _normalize(code: str, modifiers: set[str]) -> KeyEvent:
    if len(code) == 1:
        if "shift" in modifiers and code.isalpha():
            code = code.upper()
            modifiers.discard("shift")
        if "ctrl" in modifiers and code.isalpha():
            code = code.lower()
    elif code == "tab" and "shift" in modifiers:
        code = "backtab"
        modifiers.discard("shift")
    return KeyEvent(code, frozenset(modifiers))


def parse_key_event(raw: str) -> KeyEvent:
    text = raw
    modifiers: set[str] = set()
    while True:
        head, sep, rest = text.partition("-")
        if sep and rest and head.lower() in MODIFIERS:
            modifiers.add(head.lower())
            text = rest
            continue
        break

    if len(text) == 1:
        return _normalize(text, modifiers)

    name = text.lower()
    name = KEY_ALIASES.get(name, name)
    if len(name) != 1 and name not in NAMED_KEYS:
        raise ConfigError(f"unknown key: {raw!r}")
    return _normalize(name, modifiers)


def parse_key_sequence(raw: str) -> tuple[KeyEvent, ...]:
    text = str(raw).strip()
    keys: list[KeyEvent] = []
    while text:
        if not text.startswith("<"):
            raise ConfigError(f"key sequence must be written as <key><key>...: {raw!r}")
        # Search from index 2 so "<>>" binds the ">" key.
        end = text.find(">", 2)
        if end == -1:
            raise ConfigError(f"unterminated key in sequence: {raw!r}")
        keys.append(parse_key_event(text[1:end]))
        text = text[end + 1 :]
    if not keys:
        raise ConfigError("empty key sequence")
    return tuple(keys)


def key_to_string(key: KeyEvent) -> str:
    code = "space" if key.code == " " else key.code
    mods = [m for m in MODIFIERS if m in key.modifiers]
    return "-".join([*mods, code])


def sequence_to_string(keys: tuple[KeyEvent, ...]) -> str:
    return "".join(f"<{key_to_string(k)}>" for k in keys)


def _csi_table() -> dict[str, KeyEvent]:
    table = {
        "[A": "up",
        "OA": "up",
        "[B": "down",
        "OB": "down",
        "[C": "right",
        "OC": "right",
        "[D": "left",
        "OD": "left",
        "[H": "home",
        "OH": "home",
        "[1~": "home",
        "[7~": "home",
        "[F": "end",
        "OF": "end",
        "[4~": "end",
        "[8~": "end",
        "[5~": "pageup",
        "[6~": "pagedown",
        "[2~": "insert",
        "[3~": "delete",
        "[Z": "backtab",
        "OP": "f1",
        "OQ": "f2",
        "OR": "f3",
        "OS": "f4",
        "[15~": "f5",
        "[17~": "f6",
        "[18~": "f7",
        "[19~": "f8",
        "[20~": "f9",
        "[21~": "f10",
        "[23~": "f11",
        "[24~": "f12",
    }
    sequences = {ESC + seq: KeyEvent(name) for seq, name in table.items()}

    # xterm modifier encoding: ESC [ 1 ; <mod> <final>
    modifier_codes = {
        "2": {"shift"},
        "3": {"alt"},
        "4": {"alt", "shift"},
        "5": {"ctrl"},
        "6": {"ctrl", "shift"},
        "7": {"ctrl", "alt"},
    }
    finals = {"A": "up", "B": "down", "C": "right", "D": "left", "H": "home", "F": "end"}
    for mod_code, mods in modifier_codes.items():
        for final, name in finals.items():
            sequences[f"{ESC}[1;{mod_code}{final}"] = KeyEvent(name, frozenset(mods))
    return sequences


def _build_trie(sequences: dict[str, KeyEvent]) -> dict:
    root: dict = {}
    for seq, key in sequences.items():
        node = root
        for ch in seq[:-1]:
            node = node.setdefault(ch, {})
        node[seq[-1]] = key
    return root


ESCAPE_TRIE = _build_trie(_csi_table())


def _plain_key(ch: str, alt: bool = False) -> KeyEvent:
    modifiers = {"alt"} if alt else set()
    if ch in ("\r", "\n"):
        return KeyEvent("enter", frozenset(modifiers))
    if ch == "\t":
        return KeyEvent("tab", frozenset(modifiers))
    if ch in ("\x7f", "\x08"):
        return KeyEvent("backspace", frozenset(modifiers))
    if ch == ESC:
        return KeyEvent("esc", frozenset(modifiers))
    if ch == "\x00":
        return KeyEvent(" ", frozenset(modifiers | {"ctrl"}))
    code = ord(ch)
    if 1 <= code <= 26:
        return KeyEvent(chr(code + 96), frozenset(modifiers | {"ctrl"}))
    if 28 <= code <= 31:
        return KeyEvent(chr(code + 64), frozenset(modifiers | {"ctrl"}))
    return KeyEvent(ch, frozenset(modifiers))


class KeyDecoder:
    """Incremental decoder from terminal input text to key events.

    A trailing escape that could still start a longer sequence stays pending
    until more input arrives or ``flush()`` is called.
    """

    def __init__(self):
        self._pending = ""

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def feed(self, text: str) -> list[KeyEvent]:
        self._pending += text
        keys: list[KeyEvent] = []
        while self._pending:
            consumed, key = self._decode_one(self._pending)
            if consumed == 0:
                break
            self._pending = self._pending[consumed:]
            if key is not None:
                keys.append(key)
        return keys

    def flush(self) -> list[KeyEvent]:
        if not self._pending:
            return []
        rest = self._pending[1:]
        self._pending = ""
        keys = [KeyEvent("esc")]
        keys.extend(self.feed(rest))
        keys.extend(self.flush())
        return keys

    def _decode_one(self, buf: str) -> tuple[int, KeyEvent | None]:
        if buf[0] != ESC:
            return 1, _plain_key(buf[0])
        if len(buf) == 1:
            return 0, None

        if buf[1] not in "[O":
            if buf[1] == ESC:
                return 1, KeyEvent("esc")
            return 2, _plain_key(buf[1], alt=True)

        node = ESCAPE_TRIE[ESC]
        index = 1
        while index < len(buf):
            node = node.get(buf[index])
            if node is None:
                return self._skip_unknown(buf)
            if isinstance(node, KeyEvent):
                return index + 1, node
            index += 1
        return 0, None

    @staticmethod
    def _skip_unknown(buf: str) -> tuple[int, KeyEvent | None]:
        # Drop unrecognised CSI sequences (bracketed paste markers, mouse
        # reports, ...) up to their final byte.
        if buf[1] == "O":
            return (3, None) if len(buf) >= 3 else (0, None)
        for index in range(2, len(buf)):
            if "@" <= buf[index] <= "~":
                return index + 1, None
        return 0, None
