"""Grid addressing: where each bar and slot lands on the character grid.

Layout of the drawn chart (rows top to bottom)::

    SONG: <title>
    <blank>
    [A]                 <- section label
    |C   |    |F   |    <- bar rows, ``wrap`` bars per row
    |G   |
    <blank>
    [B]
    ...

Each bar starts with a ``|`` and is followed by one cell per subdivision. All
cells in a wrap-column share one width, so bars stacked vertically line up.
Nothing here holds state; recompute after every edit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from chordchart.chord_notation import format_chord
from chordchart.navigation import CursorPos
from chordchart.song import Section, Song

PREAMBLE_ROWS: Final[int] = 2  # title line + blank line
SECTION_OVERHEAD_ROWS: Final[int] = 2  # label line + trailing blank line
LEFT_MARGIN: Final[int] = 1  # the leading "|" of a row
MIN_CELL_WIDTH: Final[int] = 2


@dataclass(frozen=True)
class GridPosition:
    row: int
    col: int


def cell_width(text: str) -> int:
    """Width a chord token needs: the token plus one trailing space."""
    return len(text) + 1


def column_widths(section: Section) -> list[int]:
    """
    Cell width for each of the section's ``wrap`` columns.

    A column's width is the widest cell of any bar that falls in that column
    (``bar_index % wrap``), on any row. Empty slots count as MIN_CELL_WIDTH.
    Columns with no bars at all are 0.
    """
    widths = [0] * section.wrap
    for bar_index, bar in enumerate(section.bars):
        column = bar_index % section.wrap
        for subdivision in range(bar.subdivision):
            chord = bar.chord_at(subdivision)
            if chord is not None:
                width = cell_width(format_chord(chord))
            else:
                width = MIN_CELL_WIDTH
            widths[column] = max(widths[column], width)
    return widths


def section_row_count(section: Section) -> int:
    """Number of bar rows the section occupies (ceil(bars / wrap), at least 1)."""
    return max(len(section.bars) - 1, 0) // section.wrap + 1


def section_top(song: Song, section_index: int) -> int:
    """Row of the section's ``[label]`` line."""
    row = PREAMBLE_ROWS
    for section in song.sections[:section_index]:
        row += section_row_count(section) + SECTION_OVERHEAD_ROWS
    return row


def bar_position(song: Song, section_index: int, bar_index: int) -> GridPosition:
    """Position of the first cell of a bar (just right of its ``|``)."""
    return cursor_position(song, CursorPos(section_index, bar_index, 0))


def cursor_position(song: Song, cursor: CursorPos) -> GridPosition:
    """
    Map a (section, bar, subdivision) address to a screen row/column.

    Bars before the target on the same row advance the column by
    ``width * subdivisions + 1`` (the +1 is the separator). The target bar
    advances by ``width * subdivision``. Starting a new row resets the
    column to the left margin.
    """
    section = song.sections[cursor.section]
    widths = column_widths(section)
    wrap = section.wrap

    row = section_top(song, cursor.section) + 1
    col = LEFT_MARGIN
    for bar_index in range(cursor.bar + 1):
        width = widths[bar_index % wrap]
        if bar_index % wrap == 0 and bar_index > 0:
            row += 1
            col = LEFT_MARGIN
        if bar_index < cursor.bar:
            col += width * section.bars[bar_index].subdivision + 1
        else:
            col += width * cursor.subdivision
    return GridPosition(row=row, col=col)


def slot_width(song: Song, cursor: CursorPos) -> int:
    """Width of the cell under the cursor."""
    section = song.sections[cursor.section]
    return column_widths(section)[cursor.bar % section.wrap]
