"""Command pattern dispatch for the annotation keys."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING

from .composer import insert_feedback_block
from .keyboard import KeyType
from .shortcuts import apply_correction
from .transitions import handle_enter, handle_shift_tab, handle_tab

if TYPE_CHECKING:
    from .keyboard import KeyEvent
    from .session import AnnotationSession


class AnnotationCommand(ABC):
    """Base class for annotation commands."""

    @abstractmethod
    def execute(self, session: 'AnnotationSession', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Returns:
            True if the key event was fully handled and the host should
            skip its default behaviour
        """


class FeedbackBlockCommand(AnnotationCommand):
    def execute(self, session, key_event):
        return insert_feedback_block(session.document)


class CorrectionCommand(AnnotationCommand):
    def execute(self, session, key_event):
        settings = session.settings
        return apply_correction(session.document, settings.highlight_color, settings.plain_color)


class EnterCommand(AnnotationCommand):
    def execute(self, session, key_event):
        return handle_enter(session.document)


class TabCommand(AnnotationCommand):
    def execute(self, session, key_event):
        return handle_tab(session.document)


class ShiftTabCommand(AnnotationCommand):
    def execute(self, session, key_event):
        return handle_shift_tab(session.document)


class OpenBracketCommand(AnnotationCommand):
    def execute(self, session, key_event):
        return session.brackets.open(session.document)


class CloseBracketCommand(AnnotationCommand):
    def execute(self, session, key_event):
        settings = session.settings
        return session.brackets.close(session.document, settings.highlight_color, settings.plain_color)


class CommandRegistry:
    """Maps (key type, key) pairs to commands.

    Combinations without an entry are left to the host's default editing.
    """

    def __init__(self, feedback_key: str = '1', correction_key: str = '2'):
        self._commands: Dict[Tuple[KeyType, str], AnnotationCommand] = {}
        self._setup_default_commands(feedback_key, correction_key)

    def _setup_default_commands(self, feedback_key: str, correction_key: str):
        # Shortcut keys: Ctrl where the host can deliver it, Alt otherwise
        for key_type in (KeyType.CTRL, KeyType.ALT):
            self.register((key_type, feedback_key), FeedbackBlockCommand())
            self.register((key_type, correction_key), CorrectionCommand())

        # Line transitions
        self.register((KeyType.SPECIAL, 'enter'), EnterCommand())
        self.register((KeyType.REGULAR, '\t'), TabCommand())
        self.register((KeyType.SHIFT_SPECIAL, 'tab'), ShiftTabCommand())

        # Bracket highlight; modified brackets parse as ALT or CTRL and stay unbound
        self.register((KeyType.REGULAR, '['), OpenBracketCommand())
        self.register((KeyType.REGULAR, ']'), CloseBracketCommand())

    def register(self, key: Tuple[KeyType, str], command: AnnotationCommand):
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[AnnotationCommand]:
        return self._commands.get((key_type, value))

    def execute(self, session: 'AnnotationSession', key_event: 'KeyEvent') -> bool:
        """Run the command bound to the event.

        Returns:
            True if the event was fully handled
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None:
            return False
        return command.execute(session, key_event)
