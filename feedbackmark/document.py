"""Document model contract and an in-memory implementation.

The engine never touches document storage directly. It goes through the
operations of :class:`DocumentModel`, which any rich-text component can
implement. :class:`InMemoryDocument` is a plain line list with the same
operations, used by the terminal host and the tests.

Offsets count characters across the whole document. Every line ends with a
newline, so a line occupies ``len(text) + 1`` offsets and the offset of its
newline belongs to the line itself.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


class DocumentRangeError(IndexError):
    """Raised when a mutation addresses offsets outside the document."""


class DocumentModel(ABC):
    """Capability set the annotation engine consumes."""

    @abstractmethod
    def get_line_at(self, offset: int) -> Optional[tuple[Any, int]]:
        """Return ``(line, line_start_offset)`` for the line containing
        ``offset``, or None when there is no line there."""

    @abstractmethod
    def line_length(self, line) -> int:
        """Length of ``line`` including its terminating newline."""

    @abstractmethod
    def line_formats(self, line) -> Mapping[str, Any]:
        """Block-scope formats of ``line``."""

    @abstractmethod
    def get_selection(self) -> Optional[tuple[int, int]]:
        """Current ``(offset, length)`` selection, or None."""

    @abstractmethod
    def set_selection(self, offset: int, length: int = 0) -> None:
        pass

    @abstractmethod
    def insert_text(self, offset: int, text: str, formats: Optional[Mapping[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def delete_text(self, offset: int, length: int) -> None:
        pass

    @abstractmethod
    def format_text(self, offset: int, length: int, formats: Mapping[str, Any]) -> None:
        """Apply character-scope formats. A None value removes the format."""

    @abstractmethod
    def format_line(self, offset: int, length: int, formats: Mapping[str, Any]) -> None:
        """Apply block-scope formats to every line touched by the range.

        A None value removes the format.
        """

    @abstractmethod
    def read_text(self, offset: int, length: int) -> str:
        pass


@dataclass
class Line:
    text: str = ""
    formats: dict[str, Any] = field(default_factory=dict)
    char_formats: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        if len(self.char_formats) != len(self.text):
            self.char_formats = [{} for _ in self.text]

    def length(self) -> int:
        return len(self.text) + 1


def _merge_formats(target: dict[str, Any], formats: Mapping[str, Any]) -> None:
    for key, value in formats.items():
        if value is None:
            target.pop(key, None)
        else:
            target[key] = value


class InMemoryDocument(DocumentModel):
    """Line-list document with block and per-character formats."""

    lines: list[Line]

    def __init__(self, lines: Optional[list[Line]] = None):
        self.lines = lines if lines is not None else [Line()]
        self._selection: Optional[tuple[int, int]] = None

    @classmethod
    def from_text(cls, text: str) -> "InMemoryDocument":
        """Build a document from plain text.

        A single trailing newline is treated as the end of the last line,
        matching what :meth:`get_text` returns.
        """
        if text.endswith("\n"):
            text = text[:-1]
        return cls([Line(part) for part in text.split("\n")])

    # --- Queries ---

    def get_text(self) -> str:
        return "".join(line.text + "\n" for line in self.lines)

    def length(self) -> int:
        return sum(line.length() for line in self.lines)

    def _locate(self, offset: int) -> Optional[tuple[int, int]]:
        """Map an offset to ``(line_index, column)``; None past the end."""
        if offset < 0:
            return None
        start = 0
        for index, line in enumerate(self.lines):
            if offset < start + line.length():
                return index, offset - start
            start += line.length()
        return None

    def line_start(self, index: int) -> int:
        return sum(line.length() for line in self.lines[:index])

    def get_line_at(self, offset):
        located = self._locate(offset)
        if located is None:
            return None
        index, column = located
        return self.lines[index], offset - column

    def line_length(self, line):
        return line.length()

    def line_formats(self, line):
        return dict(line.formats)

    def char_formats_at(self, offset: int) -> dict[str, Any]:
        """Inline formats of the character at ``offset`` (empty for newlines)."""
        located = self._locate(offset)
        if located is None:
            raise DocumentRangeError(f"Offset {offset} is outside the document")
        index, column = located
        line = self.lines[index]
        if column >= len(line.text):
            return {}
        return dict(line.char_formats[column])

    def read_text(self, offset, length):
        return self.get_text()[offset:offset + length]

    # --- Selection ---

    def get_selection(self):
        return self._selection

    def set_selection(self, offset, length=0):
        self._selection = (offset, length)

    def clear_selection(self):
        self._selection = None

    # --- Mutations ---

    def insert_text(self, offset, text, formats=None):
        if not text:
            return
        total = self.length()
        if offset < 0 or offset > total:
            raise DocumentRangeError(f"Cannot insert at {offset}; document length is {total}")

        if offset == total:
            # Inserting at the very end opens a fresh line
            index, column = len(self.lines), 0
            self.lines.append(Line())
            if text.endswith("\n"):
                text = text[:-1]
                if not text:
                    return
        else:
            index, column = self._locate(offset)

        line = self.lines[index]
        inserted = dict(formats or {})
        before_text, after_text = line.text[:column], line.text[column:]
        before_chars, after_chars = line.char_formats[:column], line.char_formats[column:]

        parts = text.split("\n")
        new_lines: list[Line] = []
        for i, part in enumerate(parts):
            chars = [dict(inserted) for _ in part]
            if i == 0:
                part = before_text + part
                chars = before_chars + chars
            if i == len(parts) - 1:
                part = part + after_text
                chars = chars + after_chars
            # Splitting a line clones its block formats onto both halves
            new_lines.append(Line(part, dict(line.formats), chars))

        self.lines[index:index + 1] = new_lines
        self._shift_selection(offset, len(text))

    def delete_text(self, offset, length):
        if length <= 0:
            return
        total = self.length()
        if offset < 0 or offset + length > total:
            raise DocumentRangeError(f"Cannot delete [{offset}, {offset + length}); document length is {total}")

        first, first_col = self._locate(offset)
        last, last_col = self._locate(offset + length - 1)
        head = self.lines[first]
        tail = self.lines[last]

        if last_col >= len(tail.text):
            # The deleted range swallows the tail line's newline, so the
            # following line's newline (and formats) survive the merge
            if last + 1 < len(self.lines):
                survivor = self.lines[last + 1]
                remainder_text = survivor.text
                remainder_chars = survivor.char_formats
                last += 1
            else:
                raise DocumentRangeError("Cannot delete the final newline")
        else:
            survivor = tail
            remainder_text = tail.text[last_col + 1:]
            remainder_chars = tail.char_formats[last_col + 1:]

        merged = Line(
            head.text[:first_col] + remainder_text,
            dict(survivor.formats),
            head.char_formats[:first_col] + remainder_chars,
        )
        self.lines[first:last + 1] = [merged]
        self._shift_selection(offset, -length)

    def format_text(self, offset, length, formats):
        if length <= 0:
            return
        if offset < 0 or offset + length > self.length():
            raise DocumentRangeError(f"Cannot format [{offset}, {offset + length})")
        position = 0
        for line in self.lines:
            for column in range(len(line.text)):
                if offset <= position + column < offset + length:
                    _merge_formats(line.char_formats[column], formats)
            position += line.length()

    def format_line(self, offset, length, formats):
        if self._locate(offset) is None:
            raise DocumentRangeError(f"No line at offset {offset}")
        end = offset + max(length, 1)
        position = 0
        for line in self.lines:
            line_end = position + line.length()
            if position < end and offset < line_end:
                _merge_formats(line.formats, formats)
            position = line_end

    def _shift_selection(self, offset: int, delta: int):
        if self._selection is None:
            return
        start, length = self._selection
        if start >= offset:
            start = max(offset, start + delta)
        self._selection = (start, length)
