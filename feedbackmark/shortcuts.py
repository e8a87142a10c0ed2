"""Inline correction shortcuts: strike-and-replace and bracket highlighting."""

import logging
from typing import Optional

from .constants import AnnotationConstants as C
from .document import DocumentModel

logger = logging.getLogger(__name__)


def apply_correction(document: DocumentModel, highlight: str = C.DEFAULT_HIGHLIGHT_COLOR,
                     plain: str = C.DEFAULT_PLAIN_COLOR) -> bool:
    """Strike through the selection and open a highlighted gap after it.

    The caret lands inside the gap so the replacement can be typed
    straight away. Returns False (document untouched) without a selection.
    """
    selection = document.get_selection()
    if not selection or selection[1] <= 0:
        return False
    start, length = selection
    end = start + length
    gap = len(C.CORRECTION_GAP)

    document.format_text(start, length, {C.STRIKE_ATTR: True, C.COLOR_ATTR: highlight})
    document.insert_text(end, C.CORRECTION_GAP, {C.COLOR_ATTR: highlight})
    document.insert_text(end + gap, " ", {C.COLOR_ATTR: plain})
    document.set_selection(end + 1, 0)
    return True


class BracketShortcut:
    """Two-keystroke ``[...]`` highlight mode.

    Only the most recent ``[`` is remembered; typing another one before
    closing replaces the pending offset. Nested brackets are not tracked.
    """

    def __init__(self):
        self.bracket_start: Optional[int] = None

    def reset(self):
        self.bracket_start = None

    def open(self, document: DocumentModel) -> bool:
        """Remember where ``[`` was typed. Never consumes the key."""
        selection = document.get_selection()
        self.bracket_start = selection[0] if selection else None
        return False

    def close(self, document: DocumentModel, highlight: str = C.DEFAULT_HIGHLIGHT_COLOR,
              plain: str = C.DEFAULT_PLAIN_COLOR) -> bool:
        """Turn ``[text`` into highlighted ``text`` followed by a space.

        Returns True when the ``]`` keystroke was consumed.
        """
        if self.bracket_start is None:
            return False
        start = self.bracket_start
        selection = document.get_selection()
        if selection is None:
            # Nowhere to type the "]" either
            self.bracket_start = None
            return True
        end = selection[0]

        if end <= start or document.read_text(start, 1) != "[":
            logger.debug(f"Dropping stale bracket at {start} (caret at {end})")
            self.bracket_start = None
            return False

        span = end - start - 1
        document.delete_text(start, 1)
        document.format_text(start, span, {C.COLOR_ATTR: highlight})
        document.insert_text(start + span, " ", {C.COLOR_ATTR: plain})
        document.set_selection(start + span + 1, 0)
        self.bracket_start = None
        return True
