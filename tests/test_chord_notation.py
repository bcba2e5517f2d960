"""Unit tests for chord parsing and formatting."""

import itertools

import pytest

from chordchart.chord_notation import (
    QUALITY_TOKENS,
    Accidental,
    Chord,
    ChordParseError,
    Note,
    Quality,
    format_chord,
    parse_chord,
    try_parse_chord,
)


def test_parse_plain_major() -> None:
    chord = parse_chord("C")
    assert chord == Chord(note=Note.C, accidental=Accidental.NONE, quality=Quality.MAJ)
    assert format_chord(chord) == "C"


def test_parse_sharp_minor_seventh() -> None:
    chord = parse_chord("F#-7")
    assert chord.note is Note.F
    assert chord.accidental is Accidental.SHARP
    assert chord.quality is Quality.MIN7
    assert format_chord(chord) == "F#-7"


def test_parse_flat_is_lowercase_b() -> None:
    chord = parse_chord("Bb7")
    assert chord.note is Note.B
    assert chord.accidental is Accidental.FLAT
    assert chord.quality is Quality.DOM7


def test_note_is_case_insensitive() -> None:
    assert parse_chord("a-") == Chord(note=Note.A, quality=Quality.MIN)
    assert format_chord(parse_chord("a-")) == "A-"


@pytest.mark.parametrize(
    ("token", "quality"),
    [
        ("m", Quality.MIN),
        ("-", Quality.MIN),
        ("m7", Quality.MIN7),
        ("^", Quality.MAJ7),
        ("^7", Quality.MAJ7),
        ("M7", Quality.MAJ7),
        ("dim", Quality.DIM),
        ("o", Quality.DIM),
        ("dim7", Quality.DIM7),
        ("o7", Quality.DIM7),
        ("hd", Quality.HALF_DIM),
        ("6", Quality.MAJ6),
        ("m6", Quality.MIN6),
        ("-6", Quality.MIN6),
    ],
)
def test_quality_tokens(token: str, quality: Quality) -> None:
    assert parse_chord(f"G{token}").quality is quality


def test_bass_and_flags() -> None:
    chord = parse_chord("Eb^/g!?")
    assert chord.accidental is Accidental.FLAT
    assert chord.quality is Quality.MAJ7
    assert chord.bass is Note.G
    assert chord.special
    assert chord.question
    assert format_chord(chord) == "Eb^/G!?"


def test_canonical_formatting_of_aliases() -> None:
    assert format_chord(parse_chord("Cm7")) == "C-7"
    assert format_chord(parse_chord("CM7")) == "C^"
    assert format_chord(parse_chord("Cdim")) == "Co"
    assert format_chord(parse_chord("Chd")) == "Cm7b5"


@pytest.mark.parametrize("text", ["", "H", "7", "#C", "Cmaj7", "C13", "Csus4", "C/Bb", "C ", "C?!"])
def test_rejects_tokens_outside_grammar(text: str) -> None:
    with pytest.raises(ChordParseError):
        parse_chord(text)
    assert try_parse_chord(text) is None


def test_parse_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_chord("X")


def test_formatting_only_qualities() -> None:
    assert format_chord(Chord(note=Note.D, quality=Quality.SUS)) == "Dsus"
    assert format_chord(Chord(note=Note.D, quality=Quality.AUG)) == "D+"
    assert format_chord(Chord(note=Note.D, quality=Quality.SHARP11)) == "D#11"


def test_round_trip_for_parser_supported_chords() -> None:
    supported = set(QUALITY_TOKENS.values())
    for note, accidental, quality, bass, special, question in itertools.product(
        Note, Accidental, supported, [None, Note.E], [False, True], [False, True]
    ):
        chord = Chord(note, accidental, quality, bass, special, question)
        assert parse_chord(format_chord(chord)) == chord


def test_flag_toggles_return_new_chord() -> None:
    chord = parse_chord("D")
    toggled = chord.with_question_toggled().with_special_toggled()
    assert str(toggled) == "D!?"
    assert str(chord) == "D"
