"""Terminal rendering of an annotated in-memory document."""

from dataclasses import dataclass
from typing import Optional

from .constants import AnnotationConstants as C
from .document import InMemoryDocument, Line
from .formats import LineKind, classify_formats
from .settings import AnnotationSettings

# ECMA-48 crossed-out; terminfo has no capability for it
STRIKE_ON = "\x1b[9m"


@dataclass
class VisualRow:
    """One screen row: a slice of a document line plus its decoration."""
    line_index: int
    start: int
    end: int
    decoration: str


def decoration_for(kind: LineKind) -> str:
    if kind is LineKind.MIRRORED_BLOCK:
        return C.MIRROR_BAR
    if kind is LineKind.MINOR_LABEL:
        return C.MINOR_INDENT
    return ""


class DocumentView:
    """Wraps document lines into rows and styles them with blessed."""

    def __init__(self, term, settings: Optional[AnnotationSettings] = None, width: int = C.DOCUMENT_WIDTH):
        self.term = term
        self.settings = settings or AnnotationSettings()
        self.width = width
        self.top_row = 0

    def layout(self, document: InMemoryDocument) -> list[VisualRow]:
        rows: list[VisualRow] = []
        for index, line in enumerate(document.lines):
            decoration = decoration_for(classify_formats(line.formats))
            room = max(1, self.width - len(decoration))
            start = 0
            while True:
                end = min(len(line.text), start + room)
                rows.append(VisualRow(index, start, end, decoration))
                if end >= len(line.text):
                    break
                start = end
        return rows

    def locate_cursor(self, document: InMemoryDocument, rows: list[VisualRow], offset: int) -> tuple[int, int]:
        """Map a document offset to (row, column) in the full layout."""
        found = document.get_line_at(offset)
        if found is None:
            return max(0, len(rows) - 1), 0
        line, line_start = found
        # Lines compare by value, so look the line up by identity
        index = next(i for i, candidate in enumerate(document.lines) if candidate is line)
        column = offset - line_start
        candidates = [i for i, row in enumerate(rows) if row.line_index == index]
        for i in candidates:
            row = rows[i]
            if row.start <= column < row.end or i == candidates[-1]:
                return i, len(row.decoration) + column - row.start
        return candidates[-1], 0

    def _selected_columns(self, document: InMemoryDocument, index: int) -> Optional[tuple[int, int]]:
        selection = document.get_selection()
        if not selection or selection[1] <= 0:
            return None
        start = document.line_start(index)
        line = document.lines[index]
        sel_start, sel_end = selection[0] - start, selection[0] + selection[1] - start
        lo, hi = max(0, sel_start), min(len(line.text), sel_end)
        return (lo, hi) if lo < hi else None

    def _char_style(self, formats: dict, selected: bool) -> str:
        parts = [self.term.normal]
        if formats.get(C.GREYED_ATTR):
            parts.append(self.term.bright_black)
        color = formats.get(C.COLOR_ATTR)
        if color and color != self.settings.plain_color:
            parts.append(self.term.formatter(color))
        if formats.get(C.STRIKE_ATTR) and self.term.does_styling:
            parts.append(STRIKE_ON)
        if selected:
            parts.append(self.term.reverse)
        return ''.join(parts)

    def render_row(self, line: Line, row: VisualRow, selected: Optional[tuple[int, int]]) -> str:
        out = [self.term.dim(row.decoration) if row.decoration else ""]
        current = None
        for column in range(row.start, row.end):
            is_selected = bool(selected and selected[0] <= column < selected[1])
            style = self._char_style(line.char_formats[column], is_selected)
            if style != current:
                out.append(style)
                current = style
            ch = line.text[column]
            out.append(' ' if ch == '\t' else ch)
        if current is not None:
            out.append(self.term.normal)
        return ''.join(out)

    def render(self, document: InMemoryDocument, caret: int, height: int) -> tuple[list[str], int, int]:
        """Render the rows visible in ``height`` rows, scrolled to the caret.

        Returns the styled lines and the cursor position on screen.
        """
        rows = self.layout(document)
        cursor_row, cursor_x = self.locate_cursor(document, rows, caret)
        if cursor_row < self.top_row:
            self.top_row = cursor_row
        elif cursor_row >= self.top_row + height:
            self.top_row = cursor_row - height + 1

        selections: dict[int, Optional[tuple[int, int]]] = {}
        lines = []
        for row in rows[self.top_row:self.top_row + height]:
            if row.line_index not in selections:
                selections[row.line_index] = self._selected_columns(document, row.line_index)
            line = document.lines[row.line_index]
            lines.append(self.render_row(line, row, selections[row.line_index]))
        return lines, cursor_row - self.top_row, cursor_x
