"""Editing session state for one annotated document.

The session owns the only mutable state the engine keeps between key
events: the pending bracket offset. Everything else is read from the
document on demand.
"""

from typing import Optional

from .commands import CommandRegistry
from .composer import insert_feedback_block
from .document import DocumentModel
from .keyboard import KeyEvent
from .settings import AnnotationSettings
from .shortcuts import BracketShortcut, apply_correction


class AnnotationSession:
    """Binds a document to the annotation commands."""

    def __init__(self, document: DocumentModel, settings: Optional[AnnotationSettings] = None):
        self.document = document
        self.settings = settings or AnnotationSettings()
        self.brackets = BracketShortcut()
        self.command_registry = CommandRegistry(
            feedback_key=self.settings.feedback_key,
            correction_key=self.settings.correction_key,
        )

    @property
    def bracket_start(self) -> Optional[int]:
        return self.brackets.bracket_start

    def insert_feedback_block(self) -> bool:
        return insert_feedback_block(self.document)

    def apply_correction(self) -> bool:
        return apply_correction(self.document, self.settings.highlight_color, self.settings.plain_color)

    def handle_key(self, key_event: KeyEvent) -> bool:
        """Offer a key event to the engine.

        Returns:
            True if the engine handled it; the host must then skip its
            default behaviour for this key
        """
        return self.command_registry.execute(self, key_event)
