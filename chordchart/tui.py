"""curses frontend for EditorSession.

Translates curses input into key events, draws the chart grid from
TextChartRenderer and places the highlight/caret with grid_layout.
"""

from __future__ import annotations

import curses
import os
from typing import Any

from chordchart.editor import EditorSession
from chordchart.grid_layout import cursor_position, slot_width
from chordchart.keys import Key, KeyEvent
from chordchart.line_input import ChordEntry, CommandEntry, ConfirmEntry, PromptEntry
from chordchart.sheet_renderers import TextChartRenderer

ESCAPE_DELAY_MS = "25"

_CURSES_KEYS: dict[int, Key] = {
    curses.KEY_LEFT: Key.LEFT,
    curses.KEY_RIGHT: Key.RIGHT,
    curses.KEY_UP: Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    curses.KEY_DC: Key.DELETE,
    curses.KEY_BACKSPACE: Key.BACKSPACE,
    curses.KEY_ENTER: Key.ENTER,
    curses.KEY_PPAGE: Key.PAGE_UP,
    curses.KEY_NPAGE: Key.PAGE_DOWN,
    curses.KEY_F3: Key.F3,
    curses.KEY_F4: Key.F4,
}


def translate_key(raw: int | str) -> KeyEvent:
    """Map a ``get_wch()`` result onto a backend-neutral key event."""
    if isinstance(raw, str):
        return raw
    return _CURSES_KEYS.get(raw, Key.OTHER)


class CursesFrontend:
    def __init__(self, stdscr: Any, session: EditorSession) -> None:
        self.stdscr = stdscr
        self.session = session
        self.renderer = TextChartRenderer()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def _put(self, row: int, col: int, text: str, attr: int = curses.A_NORMAL) -> None:
        """addstr clipped to the window; the bottom-right cell is never written."""
        height, width = self.stdscr.getmaxyx()
        if not 0 <= row < height or not 0 <= col < width:
            return
        room = width - col - (1 if row == height - 1 else 0)
        if room > 0:
            self.stdscr.addstr(row, col, text[:room], attr)

    def draw(self) -> None:
        session = self.session
        song = session.song
        cursor = session.cursor
        height, _ = self.stdscr.getmaxyx()

        self.stdscr.erase()
        for row, line in enumerate(self.renderer.lines(song, cursor)):
            self._put(row, 0, line)

        caret = cursor_position(song, cursor)
        entry = session.active_entry
        if isinstance(entry, ChordEntry):
            self._put(caret.row, caret.col, entry.buffer + " ", curses.A_REVERSE)
        else:
            chord = session.navigator.chord
            width = slot_width(song, cursor)
            text = str(chord) if chord is not None else ""
            self._put(caret.row, caret.col, text.ljust(width), curses.A_REVERSE)

        status_row = height - 1
        if isinstance(entry, CommandEntry):
            self._put(status_row, 0, ":" + entry.buffer, curses.A_REVERSE)
        elif isinstance(entry, (PromptEntry, ConfirmEntry)):
            self._put(status_row, 0, entry.message + entry.buffer, curses.A_REVERSE)
        else:
            message = session.status_message()
            if message:
                self._put(status_row, 0, message, curses.A_REVERSE)

        prompting = isinstance(entry, (CommandEntry, PromptEntry, ConfirmEntry))
        curses.curs_set(1 if prompting else 0)
        self.stdscr.refresh()

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def read_key(self) -> KeyEvent:
        """Redraw, then block for the next key."""
        self.draw()
        return translate_key(self.stdscr.get_wch())

    def run(self) -> None:
        self.stdscr.keypad(True)
        curses.noecho()
        curses.curs_set(0)
        while not self.session.should_quit:
            self.session.handle(self.read_key(), self.read_key)


def run_editor(session: EditorSession) -> None:
    """Take over the terminal and edit until the session quits."""
    os.environ.setdefault("ESCDELAY", ESCAPE_DELAY_MS)
    curses.wrapper(lambda stdscr: CursesFrontend(stdscr, session).run())
