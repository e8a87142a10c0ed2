"""Test keyboard token parsing."""

import pytest
from feedbackmark.keyboard import KeyboardHandler, KeyEvent, KeyType, split_token


class MockTerminal:
    """Mock terminal interface returning queued key tokens."""

    def __init__(self, keys=None):
        self._key_queue = list(keys or [])

    def get_key(self, timeout=None):
        if self._key_queue:
            return self._key_queue.pop(0)
        return None


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


@pytest.mark.parametrize("token, key_type, value", [
    ('a', KeyType.REGULAR, 'a'),
    ('[', KeyType.REGULAR, '['),
    (']', KeyType.REGULAR, ']'),
    ('<TAB>', KeyType.REGULAR, '\t'),
    ('\t', KeyType.REGULAR, '\t'),
    ('<Shift-TAB>', KeyType.SHIFT_SPECIAL, 'tab'),
    ('<BTAB>', KeyType.SHIFT_SPECIAL, 'tab'),
    ('<Ctrl-j>', KeyType.SPECIAL, 'enter'),
    ('\r', KeyType.SPECIAL, 'enter'),
    ('<ENTER>', KeyType.SPECIAL, 'enter'),
    ('<Esc+1>', KeyType.ALT, '1'),
    ('<Ctrl-s>', KeyType.CTRL, 's'),
    ('\x11', KeyType.CTRL, 'q'),
    ('<BACKSPACE>', KeyType.SPECIAL, 'backspace'),
    ('\x7f', KeyType.SPECIAL, 'backspace'),
    ('<Shift-LEFT>', KeyType.SHIFT_SPECIAL, 'left'),
    ('<SPACE>', KeyType.REGULAR, ' '),
    ('\x1b', KeyType.SPECIAL, 'escape'),
    ('<PAGEUP>', KeyType.SPECIAL, 'page_up'),
    ('<Esc>', KeyType.SPECIAL, 'escape'),
    ('<Meta-x>', KeyType.ALT, 'x'),
    ('\x08', KeyType.SPECIAL, 'backspace'),
    ('\n', KeyType.SPECIAL, 'enter'),
])
def test_parse_key(handler, token, key_type, value):
    event = handler.parse_key(token)
    assert event.key_type == key_type
    assert event.value == value


def test_modifier_flags(handler):
    assert handler.parse_key('<Esc+1>').is_alt
    assert handler.parse_key('<Ctrl-x>').is_ctrl
    assert not handler.parse_key('[').is_alt
    assert handler.parse_key('<Shift-TAB>').is_shift


def test_get_key_event_reads_from_terminal():
    handler = KeyboardHandler(MockTerminal(['<Esc+2>']))
    event = handler.get_key_event()
    assert event == KeyEvent(key_type=KeyType.ALT, value='2', raw='<Esc+2>', is_alt=True)
    assert handler.get_key_event() is None


def test_split_token_folds_alt_and_back_tab():
    assert split_token('Esc+1') == ({'alt'}, '1')
    assert split_token('Meta-LEFT') == ({'alt'}, 'left')
    assert split_token('BTAB') == ({'shift'}, 'tab')
    assert split_token('PAGEDOWN') == (set(), 'page_down')
