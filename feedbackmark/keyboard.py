"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + arrow keys, Shift-Tab


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'tab', '1')
    raw: str  # The raw key token
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False


# Names the editor and the annotation engine act on
SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert', 'tab', 'escape',
}

# Alternative spellings curtsies and terminals use for the same key
KEY_ALIASES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'return': 'enter',
    'esc': 'escape',
    'del': 'delete',
    'space': ' ',
    'spacebar': ' ',
    'spc': ' ',
}

# Single control characters with a fixed meaning
CONTROL_CHARS = {
    '\t': (KeyType.REGULAR, '\t'),
    '\r': (KeyType.SPECIAL, 'enter'),
    '\n': (KeyType.SPECIAL, 'enter'),
    '\x7f': (KeyType.SPECIAL, 'backspace'),
    '\x08': (KeyType.SPECIAL, 'backspace'),
    '\x1b': (KeyType.SPECIAL, 'escape'),
}


def split_token(name: str) -> tuple[set, str]:
    """Split the inside of a ``<...>`` token into (modifiers, base key).

    curtsies writes Alt as ``Esc+`` or ``Meta-`` and Shift-Tab as ``BTAB``;
    both are folded into plain modifier names here.
    """
    parts = name.lower().replace('+', '-').split('-')
    base, mods = parts[-1], set(parts[:-1])
    if mods & {'meta', 'esc'}:
        mods = (mods - {'meta', 'esc'}) | {'alt'}
    if base == 'btab':
        base, mods = 'tab', mods | {'shift'}
    return mods, KEY_ALIASES.get(base, base)


class KeyboardHandler:
    """Turns key tokens from the terminal into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token (e.g. '<Ctrl-x>', '<Shift-TAB>', '<Esc+1>', 'a')."""
        key_str = str(key)
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            mods, base = split_token(key_str[1:-1])
            return self._named_key(mods, base, key_str)
        if len(key_str) == 1:
            return self._single_char(key_str)
        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

    def _named_key(self, mods: set, base: str, raw: str) -> KeyEvent:
        if not mods:
            if base in (' ', 'tab'):
                value = '\t' if base == 'tab' else ' '
                return KeyEvent(key_type=KeyType.REGULAR, value=value, raw=value)
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=raw)

        if 'ctrl' in mods and len(base) == 1:
            # Ctrl-J and Ctrl-M are what the terminal sends for Return
            if base in ('j', 'm'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw)
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=raw, is_ctrl=True)
        if 'alt' in mods:
            # Alt-digit is how the annotation shortcuts arrive
            return KeyEvent(key_type=KeyType.ALT, value=base, raw=raw, is_alt=True)
        if 'shift' in mods and base in SPECIAL_KEYS:
            return KeyEvent(key_type=KeyType.SHIFT_SPECIAL, value=base, raw=raw, is_shift=True)
        return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=raw)

    def _single_char(self, ch: str) -> KeyEvent:
        if ch in CONTROL_CHARS:
            key_type, value = CONTROL_CHARS[ch]
            return KeyEvent(key_type=key_type, value=value, raw=ch)
        code = ord(ch)
        if 1 <= code <= 26:  # Ctrl-A .. Ctrl-Z
            return KeyEvent(key_type=KeyType.CTRL, value=chr(ord('a') + code - 1), raw=ch, is_ctrl=True)
        return KeyEvent(key_type=KeyType.REGULAR, value=ch, raw=ch)
