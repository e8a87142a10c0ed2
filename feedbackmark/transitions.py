"""Enter / Tab / Shift-Tab transitions on annotation lines.

Each handler inspects the kind of the line holding the caret and returns
True when it fully handled the key, so the host can suppress its default
behaviour. Unhandled keys leave the document untouched.
"""

import logging

from .composer import insert_label_line
from .document import DocumentModel
from .formats import LineKind, classify_formats, indent_level, kind_at

logger = logging.getLogger(__name__)


def _caret_line(document: DocumentModel):
    """Return ``(caret, line, line_start, kind, formats)`` or None."""
    selection = document.get_selection()
    if selection is None:
        return None
    caret = selection[0]
    found = document.get_line_at(caret)
    if found is None:
        logger.debug(f"No line at caret offset {caret}")
        return None
    line, start = found
    formats = document.line_formats(line)
    return caret, line, start, classify_formats(formats), formats


def _label_body(document: DocumentModel, line, start: int, kind: LineKind) -> str:
    """Text typed after the glyph of a label line."""
    text = document.read_text(start, document.line_length(line) - 1)
    if text.startswith(kind.prefix):
        return text[len(kind.prefix):]
    return text


def _at_line_start(caret: int, start: int, kind: LineKind) -> bool:
    # The free-text region right after the glyph counts as the line start
    return caret - start in (0, len(kind.prefix))


def _replace_prefix(document: DocumentModel, caret: int, start: int, old: LineKind, new: LineKind):
    if document.read_text(start, len(old.prefix)) == old.prefix:
        document.delete_text(start, len(old.prefix))
    document.insert_text(start, new.prefix)
    document.format_line(start, len(new.prefix) + 1, new.line_formats())
    document.set_selection(caret, 0)


def handle_enter(document: DocumentModel) -> bool:
    context = _caret_line(document)
    if context is None:
        return False
    caret, line, start, kind, _ = context
    after = start + document.line_length(line)

    if kind is LineKind.MIRRORED_BLOCK:
        insert_label_line(document, after, LineKind.MAIN_LABEL)
        return True

    if kind not in (LineKind.MAIN_LABEL, LineKind.MINOR_LABEL):
        return False

    body = _label_body(document, line, start, kind)
    if body == "" and start > 0 and kind_at(document, start - 1) is kind:
        # Second Enter on an empty label leaves the hierarchy
        if document.read_text(start, len(kind.prefix)) == kind.prefix:
            document.delete_text(start, len(kind.prefix))
        document.format_line(start, 1, LineKind.NORMAL.line_formats())
        document.set_selection(start, 0)
        return True

    insert_label_line(document, after, kind)
    return True


def handle_tab(document: DocumentModel) -> bool:
    context = _caret_line(document)
    if context is None:
        return False
    caret, _, start, kind, formats = context

    if kind is LineKind.MAIN_LABEL and _at_line_start(caret, start, kind):
        _replace_prefix(document, caret, start, LineKind.MAIN_LABEL, LineKind.MINOR_LABEL)
        return True

    # Tab is swallowed on unindented lines
    return indent_level(formats) <= 0


def handle_shift_tab(document: DocumentModel) -> bool:
    context = _caret_line(document)
    if context is None:
        return False
    caret, _, start, kind, formats = context

    if kind is LineKind.MINOR_LABEL and _at_line_start(caret, start, kind):
        _replace_prefix(document, caret, start, LineKind.MINOR_LABEL, LineKind.MAIN_LABEL)
        return True

    return indent_level(formats) <= 1
