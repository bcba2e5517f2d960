"""Cursor navigation over a Song.

The Navigator owns the cursor and is the only place that grows or shrinks the
document structure: bars and sections are appended when the cursor moves past
the end, and removed by ``delete_at_cursor`` once they are empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chordchart.chord_notation import Chord
from chordchart.song import Bar, Section, Song

logger = logging.getLogger(__name__)


@dataclass
class CursorPos:
    section: int = 0
    bar: int = 0
    subdivision: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        return self.section, self.bar, self.subdivision


class Navigator:
    """
    Cursor state machine over a Song.

    Every public move is total on a non-empty song. The only transient state
    that does not address a real slot is the one-past-end bar index left by
    ``prev_section``; ``prev_bar`` corrects it straight away.
    """

    def __init__(self, song: Song, cursor: CursorPos | None = None) -> None:
        self.song = song
        self.cursor = cursor if cursor is not None else CursorPos()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def section(self) -> Section:
        return self.song.sections[self.cursor.section]

    @property
    def bar(self) -> Bar:
        return self.section.bars[self.cursor.bar]

    @property
    def chord(self) -> Chord | None:
        return self.bar.chord_at(self.cursor.subdivision)

    def _is_last_bar(self) -> bool:
        return self.cursor.bar + 1 >= len(self.section.bars)

    def _is_last_section(self) -> bool:
        return self.cursor.section + 1 >= len(self.song.sections)

    def _clamp_subdivision(self) -> None:
        self.cursor.subdivision = min(self.cursor.subdivision, self.bar.subdivision - 1)

    # ------------------------------------------------------------------
    # Forward moves
    # ------------------------------------------------------------------

    def next_subdivision(self) -> None:
        if self.cursor.subdivision + 1 < self.bar.subdivision:
            self.cursor.subdivision += 1
        else:
            self.next_or_create_bar()

    def next_or_create_bar(self) -> None:
        if not self._is_last_bar():
            self.cursor.bar += 1
            self.cursor.subdivision = 0
        elif self._is_last_section():
            self.section.append_bar()
            logger.debug("Appended bar %d to section %s", self.cursor.bar + 1, self.section.label)
            self.cursor.bar += 1
            self.cursor.subdivision = 0
        else:
            self.next_or_create_section()

    def next_or_create_section(self) -> None:
        if self._is_last_section():
            section = self.song.append_section()
            logger.debug("Appended section %s", section.label)
        self.cursor.section += 1
        self.cursor.bar = 0
        self.cursor.subdivision = 0

    def next_bar(self) -> None:
        """Move down one bar without growing; parks on the last slot at the end."""
        if self._is_last_bar():
            self.cursor.subdivision = self.section.bars[-1].subdivision - 1
            return
        self.cursor.bar += 1
        self._clamp_subdivision()

    # ------------------------------------------------------------------
    # Backward moves
    # ------------------------------------------------------------------

    def prev_subdivision(self) -> None:
        if self.cursor.subdivision > 0:
            self.cursor.subdivision -= 1
            return
        self.prev_bar()
        self.cursor.subdivision = self.bar.subdivision - 1

    def prev_bar(self) -> None:
        if self.cursor.bar == 0 and self.cursor.subdivision > 0:
            self.cursor.subdivision = 0
            return
        if self.cursor.bar == 0:
            self.prev_section()
        self.cursor.bar = max(self.cursor.bar - 1, 0)
        self._clamp_subdivision()

    def prev_section(self) -> None:
        """
        Step back one section.

        The bar index is set to the previous section's bar count, one past its
        last bar. Callers that need a real slot must step back a bar.
        """
        if self.cursor.section > 0:
            self.cursor.section -= 1
            self.cursor.bar = len(self.section.bars)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def row_down(self) -> None:
        for _ in range(self.section.wrap):
            self.next_bar()

    def row_up(self) -> None:
        for _ in range(self.section.wrap):
            self.prev_bar()

    # ------------------------------------------------------------------
    # Edits at the cursor
    # ------------------------------------------------------------------

    def put_chord(self, chord: Chord, at: CursorPos | None = None) -> None:
        position = at if at is not None else self.cursor
        bars = self.song.sections[position.section].bars
        bars[position.bar].insert_chord(position.subdivision, chord)

    def toggle_question(self) -> bool:
        chord = self.chord
        if chord is None:
            return False
        self.put_chord(chord.with_question_toggled())
        return True

    def toggle_special(self) -> bool:
        chord = self.chord
        if chord is None:
            return False
        self.put_chord(chord.with_special_toggled())
        return True

    def resize_finer(self) -> bool:
        return self.bar.double_subdivision()

    def resize_coarser(self) -> bool:
        changed = self.bar.reduce_subdivision()
        if changed:
            self._clamp_subdivision()
        return changed

    def delete_at_cursor(self) -> bool:
        """
        Remove whatever sits under the cursor.

        In order of preference: the chord in the current slot, the current
        bar if it is empty and not alone, the current section if its only bar
        is empty and it is not the only section. Returns False when there was
        nothing to remove.
        """
        cursor = self.cursor
        section = self.section
        bar = self.bar

        if bar.chord_at(cursor.subdivision) is not None:
            bar.remove_chord(cursor.subdivision)
            return True

        if bar.is_empty and len(section.bars) > 1:
            section.remove_bar(cursor.bar)
            if cursor.bar >= len(section.bars):
                cursor.bar -= 1
            self._clamp_subdivision()
            return True

        if bar.is_empty and len(self.song.sections) > 1:
            removed = self.song.remove_section(cursor.section)
            logger.debug("Removed empty section %s", removed.label)
            if cursor.section > 0:
                cursor.section -= 1
                cursor.bar = len(self.section.bars) - 1
                cursor.subdivision = self.bar.subdivision - 1
            else:
                cursor.bar = 0
                cursor.subdivision = 0
            return True

        return False
