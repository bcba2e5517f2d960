"""Document model: Song -> Section -> Bar -> sparse chord slots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Iterator

from chordchart.chord_notation import Accidental, Chord, Note, Quality

# ── Defaults ────────────────────────────────────────────────────────────────

DEFAULT_TITLE: Final[str] = "untitled"
DEFAULT_WRAP: Final[int] = 4
DEFAULT_BEATS: Final[int] = 4
DEFAULT_SUBDIVISION: Final[int] = 4

MAX_SUBDIVISION: Final[int] = 16
VALID_SUBDIVISIONS: Final[frozenset[int]] = frozenset({1, 2, 4, 8, 16})

SECTION_LABELS: Final[tuple[str, ...]] = tuple("ABCDEFGHIJKLMNOP")
OVERFLOW_LABEL: Final[str] = "?"


def next_section_label(label: str) -> str:
    """Return the label following *label*, or "?" once the alphabet runs out."""
    try:
        position = SECTION_LABELS.index(label)
    except ValueError:
        return OVERFLOW_LABEL
    if position + 1 >= len(SECTION_LABELS):
        return OVERFLOW_LABEL
    return SECTION_LABELS[position + 1]


@dataclass
class Bar:
    """
    One bar of the chart.

    ``slots`` maps a subdivision index to the chord that starts there; empty
    slots are simply absent.
    """

    beats: int = DEFAULT_BEATS
    subdivision: int = DEFAULT_SUBDIVISION
    slots: dict[int, Chord] = field(default_factory=dict)

    @classmethod
    def like(cls, other: Bar) -> Bar:
        """An empty bar with the same beats/subdivision as *other*."""
        return cls(beats=other.beats, subdivision=other.subdivision)

    @property
    def occupied(self) -> int:
        return len(self.slots)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    def chord_at(self, index: int) -> Chord | None:
        return self.slots.get(index)

    def items(self) -> Iterator[tuple[int, Chord]]:
        """Occupied slots in ascending index order."""
        for index in sorted(self.slots):
            yield index, self.slots[index]

    def insert_chord(self, index: int, chord: Chord) -> None:
        self._check_index(index)
        self.slots[index] = chord

    def remove_chord(self, index: int) -> Chord | None:
        self._check_index(index)
        return self.slots.pop(index, None)

    def reduce_subdivision(self) -> bool:
        """
        Halve the subdivision, remapping slot ``k`` to ``k // 2``.

        Two slots that land on the same index are merged with the later one
        winning. Refuses (returns False) at subdivision 1 or when the occupied
        slot count would not fit the halved bar.
        """
        if self.subdivision == 1:
            return False
        halved = self.subdivision // 2
        if len(self.slots) > halved:
            return False

        remapped: dict[int, Chord] = {}
        for index, chord in self.items():
            remapped[index // 2] = chord
        self.slots = remapped
        self.subdivision = halved
        return True

    def double_subdivision(self) -> bool:
        """Double the subdivision, remapping slot ``k`` to ``k * 2``."""
        if self.subdivision >= MAX_SUBDIVISION:
            return False
        self.slots = {index * 2: chord for index, chord in self.items()}
        self.subdivision *= 2
        return True

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.subdivision:
            raise IndexError(
                f"Slot {index} is outside a bar of {self.subdivision} subdivisions."
            )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "beats": self.beats,
            "subdivision": self.subdivision,
            "chords": {str(index): _chord_to_dict(chord) for index, chord in self.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bar:
        beats = int(data["beats"])
        subdivision = int(data["subdivision"])
        if beats < 1:
            raise ValueError(f"Bar beats must be positive, got {beats}")
        if subdivision not in VALID_SUBDIVISIONS:
            raise ValueError(f"Invalid subdivision: {subdivision}")

        bar = cls(beats=beats, subdivision=subdivision)
        for key, chord_data in data.get("chords", {}).items():
            index = int(key)
            if not 0 <= index < subdivision:
                raise ValueError(f"Chord slot {index} outside subdivision {subdivision}")
            bar.slots[index] = _chord_from_dict(chord_data)
        return bar


@dataclass
class Section:
    """A labelled run of bars laid out ``wrap`` bars per row."""

    label: str = SECTION_LABELS[0]
    bars: list[Bar] = field(default_factory=lambda: [Bar()])
    repeats: bool = False
    wrap: int = DEFAULT_WRAP

    def append_bar(self) -> Bar:
        """Append an empty bar cloned from the current last bar."""
        bar = Bar.like(self.bars[-1]) if self.bars else Bar()
        self.bars.append(bar)
        return bar

    def remove_bar(self, index: int) -> Bar:
        return self.bars.pop(index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "bars": [bar.to_dict() for bar in self.bars],
            "repeats": self.repeats,
            "wrap": self.wrap,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        wrap = int(data.get("wrap", DEFAULT_WRAP))
        if wrap < 1:
            raise ValueError(f"Section wrap must be at least 1, got {wrap}")
        bars = [Bar.from_dict(bar) for bar in data["bars"]]
        if not bars:
            raise ValueError(f"Section '{data.get('label')}' has no bars")
        return cls(
            label=str(data["label"]),
            bars=bars,
            repeats=bool(data.get("repeats", False)),
            wrap=wrap,
        )


@dataclass
class Song:
    title: str = DEFAULT_TITLE
    sections: list[Section] = field(default_factory=lambda: [Section()])

    @classmethod
    def new(cls) -> Song:
        """Fresh document: one section "A" holding one empty 4/4 bar."""
        return cls()

    def append_section(self) -> Section:
        """
        Append a section after the last one.

        The new section copies the previous section's wrap, takes the next
        label in the alphabet and is seeded with one bar cloned from the
        previous section's last bar.
        """
        previous = self.sections[-1]
        section = Section(
            label=next_section_label(previous.label),
            bars=[Bar.like(previous.bars[-1]) if previous.bars else Bar()],
            repeats=False,
            wrap=previous.wrap,
        )
        self.sections.append(section)
        return section

    def remove_section(self, index: int) -> Section:
        return self.sections.pop(index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "sections": [section.to_dict() for section in self.sections],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Song:
        sections = [Section.from_dict(section) for section in data["sections"]]
        if not sections:
            raise ValueError("Song has no sections")
        return cls(title=str(data.get("title", DEFAULT_TITLE)), sections=sections)


# ── Chord (de)serialization ─────────────────────────────────────────────────

def _chord_to_dict(chord: Chord) -> dict[str, Any]:
    return {
        "note": chord.note.value,
        "accidental": chord.accidental.value,
        "quality": chord.quality.value,
        "over": chord.bass.value if chord.bass is not None else None,
        "special": chord.special,
        "question": chord.question,
    }


def _chord_from_dict(data: dict[str, Any]) -> Chord:
    over = data.get("over")
    return Chord(
        note=Note(data["note"]),
        accidental=Accidental(data.get("accidental", Accidental.NONE.value)),
        quality=Quality(data.get("quality", Quality.MAJ.value)),
        bass=Note(over) if over is not None else None,
        special=bool(data.get("special", False)),
        question=bool(data.get("question", False)),
    )
