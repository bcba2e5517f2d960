"""Unit tests for ChartExporter, the chord timeline and voicing."""

from fractions import Fraction
from pathlib import Path

import pytest

from chordchart.chart_exporter import ChartExporter, title_to_filename
from chordchart.chord_notation import parse_chord
from chordchart.chord_timeline import meter_changes, song_length, song_timeline
from chordchart.midi_exporter import MidiExporter
from chordchart.song import Bar, Section, Song
from chordchart.voicing_strategy import BassVoicer, TriadVoicer, root_pitch_class


def _two_bar_song() -> Song:
    first = Bar(beats=4, subdivision=4)
    first.insert_chord(0, parse_chord("C"))
    first.insert_chord(2, parse_chord("A-"))
    second = Bar(beats=4, subdivision=2)
    second.insert_chord(1, parse_chord("G7/B"))
    return Song(title="Two Bars", sections=[Section(bars=[first, second])])


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------


def test_timeline_start_times_and_sustain() -> None:
    events = song_timeline(_two_bar_song())
    assert [e.name for e in events] == ["C", "A-", "G7/B"]
    assert [e.start_beat for e in events] == [0, 2, 6]
    assert [e.duration for e in events] == [2, 4, 2]


def test_timeline_handles_odd_slot_lengths() -> None:
    bar = Bar(beats=3, subdivision=2)
    bar.insert_chord(1, parse_chord("D"))
    events = song_timeline(Song(sections=[Section(bars=[bar])]))
    assert events[0].start_beat == Fraction(3, 2)
    assert events[0].duration == Fraction(3, 2)


def test_empty_song_has_no_events() -> None:
    assert song_timeline(Song.new()) == []
    assert song_length(Song.new()) == 4


def test_meter_changes_follow_beat_counts() -> None:
    waltz = Bar(beats=3)
    song = Song(sections=[Section(bars=[Bar(), Bar(), waltz]), Section(bars=[Bar(beats=3), Bar()])])
    assert meter_changes(song) == [(0, 4), (8, 3), (14, 4)]


# ---------------------------------------------------------------------------
# Voicing
# ---------------------------------------------------------------------------


def test_root_pitch_class_applies_accidental() -> None:
    assert root_pitch_class(parse_chord("C#")) == 1
    assert root_pitch_class(parse_chord("Cb")) == 11
    assert root_pitch_class(parse_chord("Bb")) == 10


def test_triad_voicer_right_hand_only() -> None:
    event = song_timeline(_two_bar_song())[1]
    voiced = TriadVoicer().voice(event)
    assert voiced.right_hand_notes == [69, 72, 76]
    assert voiced.left_hand_notes == []


def test_bass_voicer_uses_slash_note() -> None:
    event = song_timeline(_two_bar_song())[2]
    voiced = BassVoicer().voice(event)
    assert voiced.right_hand_notes == [67, 71, 74, 77]
    assert voiced.left_hand_notes == [59]


def test_bass_voicer_defaults_to_root() -> None:
    event = song_timeline(_two_bar_song())[0]
    assert BassVoicer().voice(event).left_hand_notes == [48]


# ---------------------------------------------------------------------------
# Exporter
# ---------------------------------------------------------------------------


def test_unsupported_format_rejected() -> None:
    with pytest.raises(ValueError):
        ChartExporter(output_format="pdf")


def test_format_is_normalized() -> None:
    assert ChartExporter(output_format=" HTML ").output_format == "html"


def test_default_output_path_beside_source() -> None:
    exporter = ChartExporter(output_format="text")
    assert exporter.default_output_path(Song.new(), "charts/blues.json") == Path("charts/blues.txt")


def test_default_output_path_from_title() -> None:
    exporter = ChartExporter(output_format="midi")
    song = Song(title="All the Things: You Are")
    assert exporter.default_output_path(song) == Path("All_the_Things_You_Are.mid")


def test_title_to_filename_falls_back() -> None:
    assert title_to_filename("???", ".html") == "untitled.html"


def test_export_html(tmp_path: Path) -> None:
    out = tmp_path / "chart.html"
    ChartExporter(output_format="html").export(_two_bar_song(), out)
    content = out.read_text(encoding="utf-8")
    assert "<title>Two Bars</title>" in content
    assert "G7/B" in content


def test_export_text(tmp_path: Path) -> None:
    out = tmp_path / "chart.txt"
    ChartExporter(output_format="text").export(_two_bar_song(), out)
    assert out.read_text(encoding="utf-8").startswith("SONG: Two Bars\n")


def test_export_midi_writes_standard_midi_file(tmp_path: Path) -> None:
    out = tmp_path / "chart.mid"
    ChartExporter(output_format="midi", tempo=120).export(_two_bar_song(), out)
    data = out.read_bytes()
    assert data.startswith(b"MThd")
    assert b"MTrk" in data


def test_midi_exporter_writes_to_unwritable_path_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        MidiExporter().export([], str(tmp_path / "missing" / "out.mid"))


def test_export_midi_rejects_oversized_bar(tmp_path: Path) -> None:
    bar = Bar(beats=300)
    bar.insert_chord(0, parse_chord("C"))
    out = tmp_path / "long.mid"
    with pytest.raises(ValueError):
        ChartExporter(output_format="midi").export(Song(sections=[Section(bars=[bar])]), out)
    assert not out.exists()


def test_midi_exporter_writes_every_meter(tmp_path: Path) -> None:
    out = tmp_path / "meters.mid"
    MidiExporter().export([], str(out), [(Fraction(0), 4), (Fraction(8), 3)])
    # FF 58 04 <numerator> <denominator power> ...
    data = out.read_bytes()
    assert b"\xff\x58\x04\x04\x02" in data
    assert b"\xff\x58\x04\x03\x02" in data
