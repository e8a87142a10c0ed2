"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional
import sys
import select


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None

    def setup(self):
        """Enter fullscreen mode and start reading curtsies key tokens."""
        print(self.term.enter_fullscreen + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            from curtsies import Input
            self._curtsies_input = Input(keynames='curtsies')
            self._curtsies_input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen + self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            finally:
                self._curtsies_input = None

    def draw_frame(self, lines: list[str], cursor_y: int, cursor_x: int, status: str = ""):
        """Redraw the whole screen and place the cursor.

        Lines are already styled and must fit the terminal width.
        """
        out = [self.term.home + self.term.clear]
        for y, line in enumerate(lines[:self.height]):
            out.append(self.term.move(y, 0) + line)
        out.append(self.term.move(self.term.height - 1, 0) + self.term.reverse(status.ljust(self.term.width)[:self.term.width]))
        out.append(self.term.move(cursor_y, cursor_x) + self.term.normal_cursor)
        print(''.join(out), end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single key token, or None when the timeout expires."""
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1
