"""EditorSession: applies key events and commands to one open song.

The session is frontend-agnostic. ``handle()`` consumes one event from the
outer loop; sub-loops (chord entry, command line, prompts) pull their extra
keys from the ``read_key`` callable passed in, and return when done.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Final, Optional, TypeVar

from chordchart.chart_exporter import ChartExporter
from chordchart.chord_notation import try_parse_chord
from chordchart.keys import SPACE, TAB, Key, KeyEvent
from chordchart.line_input import (
    Advance,
    ChordEntry,
    Command,
    CommandEntry,
    ConfirmEntry,
    LineEntry,
    PromptEntry,
    parse_command,
)
from chordchart.navigation import CursorPos, Navigator
from chordchart.persistence import load_song, save_song
from chordchart.song import Song

logger = logging.getLogger(__name__)

ReadKey = Callable[[], KeyEvent]
PrintExporter = Callable[[Song, Optional[Path]], Path]

TOAST_TICKS: Final[int] = 2
NOTE_LETTERS: Final[frozenset[str]] = frozenset("ABCDEFGabcdefg")

EntryT = TypeVar("EntryT", bound=LineEntry)


def export_html(song: Song, source: Path | None) -> Path:
    """Default ``print`` collaborator: write an HTML chart next to the song."""
    exporter = ChartExporter(output_format="html")
    return exporter.export(song, exporter.default_output_path(song, source))


@dataclass
class Toast:
    message: str | None = None
    ticks: int = 0


class EditorSession:
    """
    One editing session over a Song.

    Attributes:
        song:         The document being edited.
        navigator:    Cursor state machine bound to ``song``.
        filename:     File bound by the last save/load, used by a bare ``save``.
        active_entry: The sub-loop currently reading keys, for the frontend
                      to draw; None in the outer loop.
        should_quit:  Set by the ``quit`` command.
    """

    def __init__(
        self,
        song: Song | None = None,
        filename: str | Path | None = None,
        exporter: PrintExporter | None = None,
    ) -> None:
        self.song = song if song is not None else Song.new()
        self.navigator = Navigator(self.song)
        self.filename = Path(filename) if filename is not None else None
        self.exporter = exporter if exporter is not None else export_html
        self.toast_state = Toast()
        self.active_entry: LineEntry | None = None
        self.should_quit = False

    @property
    def cursor(self) -> CursorPos:
        return self.navigator.cursor

    def replace_song(self, song: Song, filename: Path | None = None) -> None:
        self.song = song
        self.navigator = Navigator(song)
        self.filename = filename

    # ------------------------------------------------------------------
    # Status line
    # ------------------------------------------------------------------

    def toast(self, message: str) -> None:
        self.toast_state = Toast(message=message, ticks=TOAST_TICKS)

    def status_message(self) -> str | None:
        """Current toast, counting down one redraw per call."""
        if self.toast_state.message is None or self.toast_state.ticks == 0:
            return None
        self.toast_state.ticks -= 1
        return self.toast_state.message

    # ------------------------------------------------------------------
    # Outer loop
    # ------------------------------------------------------------------

    def handle(self, event: KeyEvent, read_key: ReadKey) -> None:
        """Apply one outer-loop key event."""
        nav = self.navigator
        if event == TAB or event == Key.F4:
            nav.next_or_create_bar()
        elif event == SPACE or event == Key.RIGHT:
            nav.next_subdivision()
        elif event == Key.LEFT:
            nav.prev_subdivision()
        elif event == Key.F3:
            nav.prev_bar()
        elif event == Key.UP:
            nav.row_up()
        elif event == Key.DOWN:
            nav.row_down()
        elif event == "s":
            nav.next_or_create_section()
        elif event == ":":
            self.command_line(read_key)
        elif event == "?":
            nav.toggle_question()
        elif event == "!":
            nav.toggle_special()
        elif event == Key.DELETE:
            nav.delete_at_cursor()
        elif event == Key.PAGE_UP:
            nav.resize_finer()
            self.toast(f"{nav.bar.subdivision} subdivisions")
        elif event == Key.PAGE_DOWN:
            if not nav.resize_coarser():
                logger.debug("Bar at %s cannot be reduced", nav.cursor.as_tuple())
            self.toast(f"{nav.bar.subdivision} subdivisions")
        elif isinstance(event, str) and event in NOTE_LETTERS:
            self.enter_chord(event, read_key)

    def _run_entry(self, entry: EntryT, read_key: ReadKey) -> EntryT:
        self.active_entry = entry
        try:
            while not entry.finished:
                entry.feed(read_key())
        finally:
            self.active_entry = None
        return entry

    # ------------------------------------------------------------------
    # Chord entry
    # ------------------------------------------------------------------

    def enter_chord(self, first: str, read_key: ReadKey) -> None:
        """Type a chord into the slot under the cursor, starting with *first*."""
        if first not in NOTE_LETTERS:
            return
        origin = CursorPos(*self.cursor.as_tuple())
        entry = self._run_entry(ChordEntry(first), read_key)
        if not entry.committed:
            return

        chord = try_parse_chord(entry.buffer)
        if chord is None:
            logger.debug("Discarded unparseable chord %r", entry.buffer)
            self.toast(f"Not a chord: {entry.buffer}")
        else:
            self.navigator.put_chord(chord, at=origin)

        if entry.advance is Advance.SUBDIVISION:
            self.navigator.next_subdivision()
        elif entry.advance is Advance.BAR:
            self.navigator.next_or_create_bar()

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def command_line(self, read_key: ReadKey) -> None:
        self.toast_state.ticks = 0
        entry = self._run_entry(CommandEntry(), read_key)
        if not entry.committed:
            return
        command = parse_command(entry.buffer)
        if command is None:
            logger.debug("Ignored command %r", entry.buffer)
            return
        self.execute(command, read_key)

    def execute(self, command: Command, read_key: ReadKey) -> None:
        if command.name == "title" and command.argument:
            self.song.title = command.argument
            self.toast(f"Set title to '{self.song.title}'.")
        elif command.name == "quit":
            self.should_quit = True
        elif command.name == "save":
            self.save(command.argument, read_key)
        elif command.name == "edit" and command.argument:
            self.load(Path(command.argument))
        elif command.name == "print":
            self.print_chart()
        elif command.name == "new":
            if self.prompt_bool("Are you sure you want to clear your song?", read_key):
                self.replace_song(Song.new())

    def save(self, name: str | None, read_key: ReadKey) -> None:
        if name is not None:
            path = Path(name)
        elif self.filename is not None:
            path = self.filename
        else:
            answer = self.prompt_line("filename? ", read_key)
            if answer is None:
                return
            if not answer:
                self.toast("need a file name to save")
                return
            path = Path(answer)

        try:
            save_song(self.song, path)
        except OSError as exc:
            logger.warning("Save to %s failed: %s", path, exc)
            self.toast(f"Could not save {path}: {exc}")
            return
        self.filename = path
        self.toast(f"Saved to {path}")

    def load(self, path: Path) -> None:
        try:
            song = load_song(path)
        except (OSError, ValueError) as exc:
            logger.warning("Load of %s failed: %s", path, exc)
            self.toast(f"Could not open {path}: {exc}")
            return
        self.replace_song(song, path)
        self.toast(f"Opened {path}")

    def print_chart(self) -> None:
        try:
            output = self.exporter(self.song, self.filename)
        except OSError as exc:
            logger.warning("Print failed: %s", exc)
            self.toast(f"Could not print: {exc}")
            return
        self.toast(f"Printed to {output}")

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def prompt_line(self, message: str, read_key: ReadKey) -> str | None:
        """Ask for a line of text; None when cancelled."""
        entry = self._run_entry(PromptEntry(message), read_key)
        return entry.buffer if entry.committed else None

    def prompt_bool(self, message: str, read_key: ReadKey) -> bool:
        entry = self._run_entry(ConfirmEntry(message), read_key)
        return entry.committed and entry.answer
