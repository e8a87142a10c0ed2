"""Test key dispatch through the annotation session."""

from feedbackmark.commands import CommandRegistry, EnterCommand, FeedbackBlockCommand
from feedbackmark.document import InMemoryDocument
from feedbackmark.formats import LineKind, classify_formats
from feedbackmark.keyboard import KeyboardHandler, KeyEvent, KeyType
from feedbackmark.session import AnnotationSession
from feedbackmark.settings import AnnotationSettings


def key(key_type, value, **flags):
    return KeyEvent(key_type=key_type, value=value, raw=value, **flags)


def make_session(text, selection=(0, 0), settings=None):
    doc = InMemoryDocument.from_text(text)
    doc.set_selection(*selection)
    return AnnotationSession(doc, settings)


def test_bracket_state_starts_empty():
    session = make_session("abc")
    assert session.bracket_start is None


def test_ctrl_and_alt_digit_insert_feedback_block():
    for key_type in (KeyType.CTRL, KeyType.ALT):
        session = make_session("The cat sat.", selection=(4, 3))
        assert session.handle_key(key(key_type, '1')) is True
        assert session.document.get_text() == "The cat sat.\ncat\n→ \n"


def test_alt_two_applies_correction():
    session = make_session("bad word", selection=(0, 3))
    assert session.handle_key(key(KeyType.ALT, '2', is_alt=True)) is True
    assert session.document.get_text() == "bad    word\n"
    assert session.document.get_selection() == (4, 0)


def test_shortcut_without_selection_is_not_handled():
    session = make_session("text", selection=(1, 0))
    assert session.handle_key(key(KeyType.ALT, '1', is_alt=True)) is False
    assert session.document.get_text() == "text\n"


def test_open_bracket_records_caret_but_is_not_consumed():
    session = make_session("hello", selection=(2, 0))
    assert session.handle_key(key(KeyType.REGULAR, '[')) is False
    assert session.bracket_start == 2
    assert session.document.get_text() == "hello\n"


def test_close_bracket_through_session():
    session = make_session("Say [hi", selection=(4, 0))
    session.handle_key(key(KeyType.REGULAR, '['))
    session.document.set_selection(7, 0)

    assert session.handle_key(key(KeyType.REGULAR, ']')) is True
    assert session.document.get_text() == "Say hi \n"
    assert session.bracket_start is None


def test_modified_brackets_are_not_routed():
    session = make_session("hello", selection=(2, 0))
    handler = KeyboardHandler(terminal_interface=None)
    for token in ('<Esc+[>', '<Esc+]>'):
        event = handler.parse_key(token)
        assert event.key_type == KeyType.ALT
        assert session.handle_key(event) is False
    assert session.bracket_start is None
    assert session.document.get_text() == "hello\n"


def test_close_bracket_uses_configured_colours():
    settings = AnnotationSettings(highlight_color="red")
    session = make_session("[x", selection=(0, 0), settings=settings)
    session.handle_key(key(KeyType.REGULAR, '['))
    session.document.set_selection(2, 0)
    session.handle_key(key(KeyType.REGULAR, ']'))
    assert session.document.char_formats_at(0) == {"color": "red"}


def test_enter_tab_and_shift_tab_are_routed():
    session = make_session("cat", selection=(1, 0))
    session.document.format_line(0, 1, LineKind.MIRRORED_BLOCK.line_formats())

    assert session.handle_key(key(KeyType.SPECIAL, 'enter')) is True
    assert session.document.get_text() == "cat\n→ \n"
    session.document.set_selection(4, 0)

    assert session.handle_key(key(KeyType.REGULAR, '\t')) is True
    assert session.document.get_text() == "cat\n↳ \n"

    assert session.handle_key(key(KeyType.SHIFT_SPECIAL, 'tab', is_shift=True)) is True
    assert session.document.get_text() == "cat\n→ \n"
    assert classify_formats(session.document.lines[1].formats) is LineKind.MAIN_LABEL


def test_unbound_keys_fall_through():
    session = make_session("text", selection=(1, 0))
    assert session.handle_key(key(KeyType.REGULAR, 'a')) is False
    assert session.handle_key(key(KeyType.SPECIAL, 'left')) is False
    assert session.handle_key(key(KeyType.CTRL, 's', is_ctrl=True)) is False


def test_configured_feedback_key():
    settings = AnnotationSettings(feedback_key='9')
    session = make_session("The cat sat.", selection=(4, 3), settings=settings)
    assert session.handle_key(key(KeyType.ALT, '1')) is False
    assert session.handle_key(key(KeyType.ALT, '9')) is True


def test_direct_commands():
    session = make_session("The cat sat.", selection=(4, 3))
    assert session.insert_feedback_block() is True
    session.document.set_selection(0, 3)
    assert session.apply_correction() is True


def test_registry_lookup_and_override():
    registry = CommandRegistry()
    assert isinstance(registry.get_command(KeyType.CTRL, '1'), FeedbackBlockCommand)
    assert isinstance(registry.get_command(KeyType.SPECIAL, 'enter'), EnterCommand)
    assert registry.get_command(KeyType.CTRL, '3') is None

    registry.register((KeyType.CTRL, '3'), EnterCommand())
    assert isinstance(registry.get_command(KeyType.CTRL, '3'), EnterCommand)
