"""Feedback block composition.

A feedback block is a mirror line holding a flattened copy of the selected
text, followed by a main label line the reviewer types into. Blocks are
attached after the paragraph containing the end of the selection, behind any
blocks already attached there.
"""

import logging
from typing import Optional

from .constants import AnnotationConstants as C
from .document import DocumentModel
from .formats import LineKind, kind_at

logger = logging.getLogger(__name__)

LABEL_KINDS = (LineKind.MAIN_LABEL, LineKind.MINOR_LABEL)


def mirror_text(selected: str) -> str:
    """Flatten a multi-line selection onto one line."""
    return selected.replace("\n", C.MIRROR_NEWLINE)


def anchor_offset(start: int, selected: str) -> int:
    """Offset of the last non-whitespace character of the selection.

    Falls back to the end of the selection when it is all whitespace.
    """
    for i in range(len(selected) - 1, -1, -1):
        if not selected[i].isspace():
            return start + i
    return start + len(selected)


def find_insertion_point(document: DocumentModel, anchor: int) -> Optional[int]:
    """Offset where a new block for the paragraph at ``anchor`` goes.

    Starts right after the anchor line and walks over every mirror line
    and the label lines following it.
    """
    found = document.get_line_at(anchor)
    if found is None:
        return None
    line, start = found
    point = start + document.line_length(line)

    while kind_at(document, point) is LineKind.MIRRORED_BLOCK:
        point = _skip_line(document, point)
        while kind_at(document, point) in LABEL_KINDS:
            point = _skip_line(document, point)
    return point


def _skip_line(document: DocumentModel, offset: int) -> int:
    line, start = document.get_line_at(offset)
    return start + document.line_length(line)


def insert_label_line(document: DocumentModel, offset: int, kind: LineKind) -> int:
    """Insert a skeleton label line of ``kind`` starting at ``offset``.

    The caret is placed after the glyph. Returns the caret offset.
    """
    document.insert_text(offset, kind.prefix + "\n")
    document.format_line(offset, len(kind.prefix) + 1, kind.line_formats())
    caret = offset + len(kind.prefix)
    document.set_selection(caret, 0)
    return caret


def insert_feedback_block(document: DocumentModel) -> bool:
    """Mirror the selection into a new feedback block.

    Returns True if a block was inserted. An empty or missing selection,
    or a selection whose anchor line cannot be found, leaves the document
    untouched.
    """
    selection = document.get_selection()
    if not selection or selection[1] <= 0:
        return False
    start, length = selection

    selected = document.read_text(start, length)
    mirror = mirror_text(selected)
    point = find_insertion_point(document, anchor_offset(start, selected))
    if point is None:
        logger.debug(f"No anchor line for selection ({start}, {length}); skipping block")
        return False

    document.format_text(start, length, {C.GREYED_ATTR: True})

    document.insert_text(point, mirror + "\n")
    document.format_line(point, len(mirror) + 1, LineKind.MIRRORED_BLOCK.line_formats())

    insert_label_line(document, point + len(mirror) + 1, LineKind.MAIN_LABEL)
    return True
