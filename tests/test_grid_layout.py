"""Unit tests for grid addressing (column widths and cursor coordinates)."""

from chordchart.chord_notation import parse_chord
from chordchart.grid_layout import (
    GridPosition,
    column_widths,
    cursor_position,
    section_row_count,
    section_top,
    slot_width,
)
from chordchart.navigation import CursorPos
from chordchart.sheet_renderers import TextChartRenderer
from chordchart.song import Bar, Section, Song


def _section(wrap: int, bars: list[dict[int, str]], label: str = "A") -> Section:
    built = []
    for chords in bars:
        bar = Bar()
        for index, text in chords.items():
            bar.insert_chord(index, parse_chord(text))
        built.append(bar)
    return Section(label=label, bars=built, wrap=wrap)


def test_empty_columns_use_minimum_width() -> None:
    assert column_widths(_section(4, [{}, {}])) == [2, 2, 0, 0]


def test_column_width_is_widest_chord_across_rows() -> None:
    section = _section(2, [{0: "F#-7"}, {}, {1: "C"}, {3: "Bb^/D"}])
    # column 0 holds bars 0 and 2, column 1 holds bars 1 and 3
    assert column_widths(section) == [len("F#-7") + 1, len("Bb^/D") + 1]


def test_single_letter_chord_does_not_exceed_minimum() -> None:
    assert column_widths(_section(1, [{0: "C"}])) == [2]


def test_section_row_count_is_ceiling() -> None:
    assert section_row_count(_section(4, [{}] * 4)) == 1
    assert section_row_count(_section(4, [{}] * 5)) == 2
    assert section_row_count(_section(2, [{}] * 6)) == 3


def test_section_top_stacks_sections() -> None:
    song = Song(sections=[_section(2, [{}] * 5), _section(4, [{}], label="B")])
    assert section_top(song, 0) == 2
    assert section_top(song, 1) == 2 + 3 + 2


def test_cursor_position_first_slot() -> None:
    assert cursor_position(Song.new(), CursorPos(0, 0, 0)) == GridPosition(row=3, col=1)


def test_cursor_position_within_row() -> None:
    song = Song(sections=[_section(4, [{}, {0: "A-7"}])])
    # bar 0: 4 cells of width 2 plus separator; bar 1 cells are width 4
    assert cursor_position(song, CursorPos(0, 1, 2)) == GridPosition(row=3, col=1 + 2 * 4 + 1 + 4 * 2)


def test_cursor_position_after_wrap() -> None:
    song = Song(sections=[_section(2, [{0: "F#-7"}, {}, {1: "C"}])])
    assert cursor_position(song, CursorPos(0, 2, 1)) == GridPosition(row=4, col=6)


def test_cursor_position_in_second_section() -> None:
    song = Song(sections=[_section(2, [{}] * 5), _section(4, [{}, {}], label="B")])
    assert cursor_position(song, CursorPos(1, 1, 0)) == GridPosition(row=8, col=1 + 2 * 4 + 1)


def test_slot_width_follows_column() -> None:
    song = Song(sections=[_section(2, [{0: "F#-7"}, {}, {}])])
    assert slot_width(song, CursorPos(0, 2, 3)) == 5
    assert slot_width(song, CursorPos(0, 1, 0)) == 2


def test_positions_match_rendered_grid() -> None:
    song = Song(
        sections=[
            _section(2, [{0: "C^"}, {2: "A-7"}, {0: "D-7", 2: "G7"}]),
            _section(3, [{1: "Eb"}, {0: "Fhd"}], label="B"),
        ]
    )
    lines = TextChartRenderer().lines(song)
    for section_index, section in enumerate(song.sections):
        for bar_index, bar in enumerate(section.bars):
            for subdivision, chord in bar.items():
                pos = cursor_position(song, CursorPos(section_index, bar_index, subdivision))
                assert lines[pos.row][pos.col:].startswith(str(chord))
