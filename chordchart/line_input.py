"""Line-input sub-loops: chord entry, command entry and prompts.

Each entry is a small state machine with its own buffer. The owner feeds it
one key at a time until ``finished`` is set, then reads the outcome. None of
them touch the document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Final

from chordchart.keys import SPACE, TAB, Key, KeyEvent, is_printable, normalize


class EntryState(Enum):
    EDITING = "editing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class Advance(Enum):
    """Cursor move requested by the key that ended a chord entry."""

    NONE = "none"
    SUBDIVISION = "subdivision"
    BAR = "bar"


class LineEntry(ABC):
    def __init__(self, initial: str = "") -> None:
        self.buffer = initial
        self.state = EntryState.EDITING

    @property
    def finished(self) -> bool:
        return self.state is not EntryState.EDITING

    @property
    def committed(self) -> bool:
        return self.state is EntryState.COMMITTED

    def _commit(self) -> None:
        self.state = EntryState.COMMITTED

    def _cancel(self) -> None:
        self.state = EntryState.CANCELLED

    @abstractmethod
    def feed(self, event: KeyEvent) -> None:
        """Consume one key."""


class ChordEntry(LineEntry):
    """
    Typing a chord token in place.

    Space and tab commit and also ask the caller to advance the cursor (next
    slot, next bar). Enter and any non-character key commit. Escape cancels.
    """

    def __init__(self, first: str = "") -> None:
        super().__init__(first)
        self.advance = Advance.NONE

    def feed(self, event: KeyEvent) -> None:
        if self.finished:
            return
        event = normalize(event)
        if is_printable(event):
            self.buffer += event
        elif event == Key.BACKSPACE:
            self.buffer = self.buffer[:-1]
        elif event == Key.ESCAPE:
            self._cancel()
        elif event == SPACE:
            self.advance = Advance.SUBDIVISION
            self._commit()
        elif event == TAB:
            self.advance = Advance.BAR
            self._commit()
        else:
            self._commit()


#: Single letters that expand when followed by a space.
COMMAND_ABBREVIATIONS: Final[dict[str, str]] = {
    "t": "title ",
    "q": "quit",
    "s": "save ",
    "e": "edit ",
    "p": "print",
    "n": "new",
}


class CommandEntry(LineEntry):
    """The ``:`` command line."""

    def feed(self, event: KeyEvent) -> None:
        if self.finished:
            return
        event = normalize(event)
        if is_printable(event):
            self.buffer += event
        elif event == Key.BACKSPACE:
            self.buffer = self.buffer[:-1]
        elif event == SPACE:
            if self.buffer in COMMAND_ABBREVIATIONS:
                self.buffer = COMMAND_ABBREVIATIONS[self.buffer]
            elif self.buffer:
                self.buffer += SPACE
        elif event == TAB:
            return
        elif event == Key.ESCAPE:
            self._cancel()
        else:
            self._commit()


class PromptEntry(LineEntry):
    """Free-text answer to a question shown on the status line."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def feed(self, event: KeyEvent) -> None:
        if self.finished:
            return
        event = normalize(event)
        if is_printable(event) or event == SPACE:
            self.buffer += event
        elif event == Key.BACKSPACE:
            self.buffer = self.buffer[:-1]
        elif event == TAB:
            return
        elif event == Key.ESCAPE:
            self._cancel()
        else:
            self._commit()


class ConfirmEntry(LineEntry):
    """A y/n question. Other characters are ignored; other keys mean no."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = f"{message} (y/n)"
        self.answer = False

    def feed(self, event: KeyEvent) -> None:
        if self.finished:
            return
        event = normalize(event)
        if isinstance(event, str) and event in ("y", "n"):
            self.answer = event == "y"
            self.buffer = event
            self._commit()
        elif isinstance(event, Key):
            self._cancel()


# ── Command grammar ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Command:
    name: str
    argument: str | None = None


_ALIASES: Final[dict[str, str]] = {
    "q": "quit",
    "s": "save",
    "p": "print",
    "n": "new",
}


def parse_command(text: str) -> Command | None:
    """
    Parse a finished command line.

    Returns None for empty or unrecognized input, and for ``title`` or
    ``edit`` without an argument.
    """
    words = text.split()
    if not words:
        return None
    name = _ALIASES.get(words[0], words[0])
    rest = words[1:]

    if name == "title":
        return Command("title", " ".join(rest)) if rest else None
    if name == "edit":
        return Command("edit", rest[0]) if rest else None
    if name == "save":
        return Command("save", rest[0] if rest else None)
    if name in ("quit", "print", "new"):
        return Command(name)
    return None
