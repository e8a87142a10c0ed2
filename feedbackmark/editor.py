"""Terminal editor hosting the annotation engine.

Every key goes to the annotation session first. Keys it does not handle
get ordinary editing behaviour here.
"""

import logging
import os
import tempfile
from typing import Optional

from .constants import AnnotationConstants as C
from .document import InMemoryDocument
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .session import AnnotationSession
from .settings import AnnotationSettings
from .terminal import TerminalInterface
from .view import DocumentView

logger = logging.getLogger(__name__)


class Editor:
    """Main controller: document, session, view and key loop."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[AnnotationSettings] = None):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.settings = settings or AnnotationSettings()
        self.document = InMemoryDocument()
        self.document.set_selection(0, 0)
        self.session = AnnotationSession(self.document, self.settings)
        self.view = DocumentView(self.terminal.term, self.settings)
        self.filename: Optional[str] = None
        self.modified = False
        self.running = False
        self.status_message: Optional[str] = None
        self._anchor: Optional[int] = None  # Fixed end of a shift-selection

    def load_file(self, filename: str):
        self.filename = filename
        if os.path.exists(filename):
            with open(filename, 'r', encoding='utf-8') as f:
                self.set_document(InMemoryDocument.from_text(f.read()))
        else:
            self.status_message = f"New file: {filename}"

    def set_document(self, document: InMemoryDocument):
        self.document = document
        self.document.set_selection(0, 0)
        self.session = AnnotationSession(document, self.settings)
        self._anchor = None

    # --- Caret and selection helpers ---

    @property
    def caret(self) -> int:
        selection = self.document.get_selection() or (0, 0)
        start, length = selection
        if self._anchor is not None and self._anchor == start:
            return start + length
        return start

    def _max_offset(self) -> int:
        return self.document.length() - 1

    def _move_to(self, offset: int, extend: bool = False):
        offset = max(0, min(offset, self._max_offset()))
        if extend:
            if self._anchor is None:
                self._anchor = self.caret
            lo, hi = sorted((self._anchor, offset))
            self.document.set_selection(lo, hi - lo)
        else:
            self._anchor = None
            self.document.set_selection(offset, 0)

    def _line_bounds(self, offset: int) -> tuple[int, int]:
        line, start = self.document.get_line_at(offset)
        return start, start + self.document.line_length(line) - 1

    def _vertical_target(self, offset: int, direction: int) -> int:
        start, end = self._line_bounds(offset)
        column = offset - start
        if direction < 0:
            if start == 0:
                return 0
            prev_start, prev_end = self._line_bounds(start - 1)
            return min(prev_start + column, prev_end)
        if end >= self._max_offset():
            return end
        next_start, next_end = self._line_bounds(end + 1)
        return min(next_start + column, next_end)

    # --- Default editing ---

    def _delete_selection(self) -> bool:
        selection = self.document.get_selection()
        if not selection or selection[1] <= 0:
            return False
        self.document.delete_text(*selection)
        self._move_to(selection[0])
        return True

    def _typing_formats(self, offset: int) -> dict:
        """Inline formats inherited from the character left of the caret."""
        start, _ = self._line_bounds(offset)
        if offset <= start:
            return {}
        formats = self.document.char_formats_at(offset - 1)
        formats.pop(C.GREYED_ATTR, None)
        formats.pop(C.STRIKE_ATTR, None)
        return formats

    def insert(self, text: str):
        self._delete_selection()
        caret = self.caret
        self.document.insert_text(caret, text, self._typing_formats(caret))
        self._move_to(caret + len(text))

    def backspace(self):
        if self._delete_selection():
            return
        caret = self.caret
        if caret > 0:
            self.document.delete_text(caret - 1, 1)
            self._move_to(caret - 1)

    def save(self) -> bool:
        """Write the document text atomically (temp file + rename)."""
        if not self.filename:
            self.status_message = "No file name; start with a FILE argument"
            return False
        dir_name = os.path.dirname(os.path.abspath(self.filename))
        base_name = os.path.basename(self.filename)
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w', encoding='utf-8', dir=dir_name,
                prefix=C.ATOMIC_SAVE_PREFIX + base_name, suffix=C.ATOMIC_SAVE_SUFFIX,
                delete=False,
            ) as f:
                temp_filename = f.name
                f.write(self.document.get_text())
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_filename, self.filename)
        except OSError as e:
            logger.warning(f"Could not save {self.filename}: {e}")
            if temp_filename and os.path.exists(temp_filename):
                os.remove(temp_filename)
            self.status_message = f"Error saving: {e}"
            return False
        self.modified = False
        self.status_message = f"Saved {self.filename}"
        return True

    def handle_key_event(self, key_event: KeyEvent):
        self.status_message = None
        before = self.document.get_text()

        if self.session.handle_key(key_event):
            self._anchor = None
        else:
            self._default_key(key_event)

        if self.document.get_text() != before:
            self.modified = True

    def _default_key(self, key_event: KeyEvent):
        kind, value = key_event.key_type, key_event.value
        if kind == KeyType.REGULAR:
            if value == '\t' or ord(value[0]) >= 32:
                self.insert(value)
        elif kind == KeyType.SPECIAL:
            if value == 'enter':
                self.insert('\n')
            elif value == 'backspace':
                self.backspace()
            elif value == 'left':
                self._move_to(self.caret - 1)
            elif value == 'right':
                self._move_to(self.caret + 1)
            elif value in ('up', 'down'):
                self._move_to(self._vertical_target(self.caret, -1 if value == 'up' else 1))
            elif value == 'home':
                self._move_to(self._line_bounds(self.caret)[0])
            elif value == 'end':
                self._move_to(self._line_bounds(self.caret)[1])
        elif kind == KeyType.SHIFT_SPECIAL:
            if value == 'left':
                self._move_to(self.caret - 1, extend=True)
            elif value == 'right':
                self._move_to(self.caret + 1, extend=True)
            elif value in ('up', 'down'):
                self._move_to(self._vertical_target(self.caret, -1 if value == 'up' else 1), extend=True)
        elif kind == KeyType.CTRL:
            if value == 's':
                self.save()
            elif value == 'q':
                self.running = False

    def _status(self) -> str:
        if self.status_message:
            return f" {self.status_message}"
        name = self.filename or "[untitled]"
        flag = " (modified)" if self.modified else ""
        pending = "  [ pending" if self.session.bracket_start is not None else ""
        keys = f"Alt-{self.settings.feedback_key} feedback  Alt-{self.settings.correction_key} correction"
        return f" {name}{flag}{pending}  |  {keys}  |  Ctrl-S save  Ctrl-Q quit"

    def draw(self):
        lines, cursor_y, cursor_x = self.view.render(self.document, self.caret, self.terminal.height)
        self.terminal.draw_frame(lines, cursor_y, cursor_x, self._status())

    def run(self):
        self.terminal.setup()
        self.running = True
        try:
            while self.running:
                self.draw()
                key_event = self.keyboard.get_key_event(timeout=None)
                if key_event:
                    self.handle_key_event(key_event)
        except KeyboardInterrupt:
            pass
        finally:
            self.terminal.cleanup()
