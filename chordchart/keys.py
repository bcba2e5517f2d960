"""Backend-neutral key events.

A key event is either a one-character ``str`` (typed characters, including
space, tab and newline) or a ``Key`` member for keys without a character.
"""

from enum import Enum
from typing import Union


class Key(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    DELETE = "delete"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESCAPE = "escape"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    F3 = "f3"
    F4 = "f4"
    OTHER = "other"


KeyEvent = Union[str, Key]

TAB = "\t"
SPACE = " "
BACKSPACE_CHARS = frozenset({"\b", "\x7f"})
ESCAPE_CHAR = "\x1b"
ENTER_CHARS = frozenset({"\n", "\r"})


def normalize(event: KeyEvent) -> KeyEvent:
    """Map control characters that have a Key meaning onto that Key."""
    if isinstance(event, str):
        if event in BACKSPACE_CHARS:
            return Key.BACKSPACE
        if event == ESCAPE_CHAR:
            return Key.ESCAPE
        if event in ENTER_CHARS:
            return Key.ENTER
    return event


def is_printable(event: KeyEvent) -> bool:
    """Printable ASCII other than space: letters, digits and punctuation."""
    return isinstance(event, str) and len(event) == 1 and "!" <= event <= "~"
