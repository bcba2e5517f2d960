"""Chord notation: parsing and formatting of single chord symbols.

Grammar (one token, no whitespace)::

    <note><accidental?><quality?>[/<bass>][!][?]

The quality part is looked up in a closed token table. Anything outside the
table is rejected rather than guessed at.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final


class ChordParseError(ValueError):
    """Raised when a chord token does not match the notation grammar."""


class Note(Enum):
    """Natural note letters A-G."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"

    @classmethod
    def from_letter(cls, letter: str) -> Note:
        """Case-insensitive lookup of a note letter.

        Raises:
            ChordParseError: If *letter* is not one of A-G.
        """
        try:
            return cls(letter.upper())
        except ValueError:
            raise ChordParseError(f"'{letter}' is not a note letter.") from None

    @property
    def pitch_class(self) -> int:
        """Pitch class of the natural note (0=C, ..., 11=B)."""
        return _PITCH_CLASSES[self]

    def __str__(self) -> str:
        return self.value


_PITCH_CLASSES: Final[dict[Note, int]] = {
    Note.C: 0,
    Note.D: 2,
    Note.E: 4,
    Note.F: 5,
    Note.G: 7,
    Note.A: 9,
    Note.B: 11,
}


class Accidental(Enum):
    NONE = "None"
    SHARP = "Sharp"
    FLAT = "Flat"

    @property
    def symbol(self) -> str:
        return _ACCIDENTAL_SYMBOLS[self]

    @property
    def offset(self) -> int:
        """Semitone offset applied to the natural note."""
        return {Accidental.NONE: 0, Accidental.SHARP: 1, Accidental.FLAT: -1}[self]


_ACCIDENTAL_SYMBOLS: Final[dict[Accidental, str]] = {
    Accidental.NONE: "",
    Accidental.SHARP: "#",
    Accidental.FLAT: "b",
}


class Quality(Enum):
    """Closed set of chord qualities.

    Member values are the names used in the persisted format.
    """

    MAJ = "Maj"
    MIN = "Min"
    DOM7 = "Dom7"
    MAJ7 = "Maj7"
    MIN7 = "Min7"
    DIM = "Dim"
    DIM7 = "Dim7"
    HALF_DIM = "HalfDim"
    AUG = "Aug"
    DOM9 = "Dom9"
    MAJ9 = "Maj9"
    MIN9 = "Min9"
    FLAT9 = "Flat9"
    SHARP9 = "Sharp9"
    MAJ11 = "Maj11"
    SHARP11 = "Sharp11"
    DOM13 = "Dom13"
    MAJ13 = "Maj13"
    FLAT13 = "Flat13"
    SUS = "Sus"
    SUS4 = "Sus4"
    SUS2 = "Sus2"
    MAJ6 = "Maj6"
    MIN6 = "Min6"

    @property
    def abbreviation(self) -> str:
        """Suffix written after the root when formatting."""
        return QUALITY_ABBREVIATIONS[self]


# ── Token tables ────────────────────────────────────────────────────────────

#: Input tokens accepted by the parser. Qualities missing here can be
#: formatted but not typed in.
QUALITY_TOKENS: Final[dict[str, Quality]] = {
    "": Quality.MAJ,
    "-": Quality.MIN,
    "m": Quality.MIN,
    "7": Quality.DOM7,
    "-7": Quality.MIN7,
    "m7": Quality.MIN7,
    "^": Quality.MAJ7,
    "^7": Quality.MAJ7,
    "M7": Quality.MAJ7,
    "dim": Quality.DIM,
    "o": Quality.DIM,
    "dim7": Quality.DIM7,
    "o7": Quality.DIM7,
    "hd": Quality.HALF_DIM,
    "m7b5": Quality.HALF_DIM,
    "6": Quality.MAJ6,
    "m6": Quality.MIN6,
    "-6": Quality.MIN6,
}

QUALITY_ABBREVIATIONS: Final[dict[Quality, str]] = {
    Quality.MAJ: "",
    Quality.MIN: "-",
    Quality.DOM7: "7",
    Quality.MAJ7: "^",
    Quality.MIN7: "-7",
    Quality.DIM: "o",
    Quality.DIM7: "o7",
    Quality.HALF_DIM: "m7b5",
    Quality.AUG: "+",
    Quality.DOM9: "9",
    Quality.MAJ9: "^9",
    Quality.MIN9: "-9",
    Quality.FLAT9: "b9",
    Quality.SHARP9: "#9",
    Quality.MAJ11: "^11",
    Quality.SHARP11: "#11",
    Quality.DOM13: "13",
    Quality.MAJ13: "^13",
    Quality.FLAT13: "b13",
    Quality.SUS: "sus",
    Quality.SUS4: "sus4",
    Quality.SUS2: "sus2",
    Quality.MAJ6: "6",
    Quality.MIN6: "m6",
}

# Groups: note, accidental, quality, bass letter, special, question.
_CHORD_RE: Final[re.Pattern[str]] = re.compile(
    r"([A-Ga-g])([#b])?(.*?)(?:/([A-Ga-g]))?(!)?(\?)?"
)


@dataclass(frozen=True)
class Chord:
    """
    A single chord symbol.

    Attributes:
        note:       Root letter.
        accidental: Sharp/flat applied to the root.
        quality:    Harmonic type suffix.
        bass:       Optional "over" note written after a slash.
        special:    Trailing ``!`` marker.
        question:   Trailing ``?`` marker.
    """

    note: Note
    accidental: Accidental = Accidental.NONE
    quality: Quality = Quality.MAJ
    bass: Note | None = None
    special: bool = False
    question: bool = False

    @classmethod
    def parse(cls, text: str) -> Chord:
        return parse_chord(text)

    def with_question_toggled(self) -> Chord:
        return replace(self, question=not self.question)

    def with_special_toggled(self) -> Chord:
        return replace(self, special=not self.special)

    def __str__(self) -> str:
        return format_chord(self)


# ── Public API ──────────────────────────────────────────────────────────────

def parse_chord(text: str) -> Chord:
    """
    Parse one chord token.

    Args:
        text: Token such as ``"F#-7"``, ``"Bb^/D"`` or ``"C7!?"``.

    Returns:
        The parsed Chord.

    Raises:
        ChordParseError: If the token does not start with a note letter or
            its quality is not in QUALITY_TOKENS.
    """
    match = _CHORD_RE.fullmatch(text)
    if match is None:
        raise ChordParseError(f"Not a chord: '{text}'.")

    note_s, accidental_s, quality_s, bass_s, special_s, question_s = match.groups()
    quality = QUALITY_TOKENS.get(quality_s)
    if quality is None:
        raise ChordParseError(f"Unknown chord quality '{quality_s}' in '{text}'.")

    if accidental_s == "#":
        accidental = Accidental.SHARP
    elif accidental_s == "b":
        accidental = Accidental.FLAT
    else:
        accidental = Accidental.NONE

    return Chord(
        note=Note.from_letter(note_s),
        accidental=accidental,
        quality=quality,
        bass=Note.from_letter(bass_s) if bass_s else None,
        special=special_s is not None,
        question=question_s is not None,
    )


def try_parse_chord(text: str) -> Chord | None:
    """Like parse_chord, but returns None instead of raising."""
    try:
        return parse_chord(text)
    except ChordParseError:
        return None


def format_chord(chord: Chord) -> str:
    """Render a chord back to its canonical token."""
    parts = [chord.note.value, chord.accidental.symbol, chord.quality.abbreviation]
    if chord.bass is not None:
        parts.append(f"/{chord.bass.value}")
    if chord.special:
        parts.append("!")
    if chord.question:
        parts.append("?")
    return "".join(parts)
