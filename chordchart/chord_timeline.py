"""Flatten a Song into a time-ordered list of chord events measured in beats."""

from dataclasses import dataclass
from fractions import Fraction

from chordchart.chord_notation import Chord, format_chord
from chordchart.song import Song


@dataclass
class ChordEvent:
    """
    A single chord occurrence on the song timeline.

    Attributes:
        chord:      The chord being played.
        start_beat: Start time in quarter-note beats from the top of the song.
        duration:   Length in beats, up to the next chord or the end of the song.
    """

    chord: Chord
    start_beat: Fraction
    duration: Fraction

    @property
    def name(self) -> str:
        """Chord symbol as written on the chart, e.g. 'F#-7'."""
        return format_chord(self.chord)


def song_length(song: Song) -> Fraction:
    """Total length of the song in beats."""
    return Fraction(sum(bar.beats for section in song.sections for bar in section.bars))


def song_timeline(song: Song) -> list[ChordEvent]:
    """
    Walk every bar in order and emit one event per occupied slot.

    A slot lasts ``beats / subdivision`` beats. Each chord sustains until the
    next chord starts; the last one runs to the end of the song. Fractions
    keep odd subdivisions of odd beat counts exact.
    """
    starts: list[tuple[Fraction, Chord]] = []
    bar_start = Fraction(0)
    for section in song.sections:
        for bar in section.bars:
            slot_length = Fraction(bar.beats, bar.subdivision)
            for index, chord in bar.items():
                starts.append((bar_start + index * slot_length, chord))
            bar_start += bar.beats

    events: list[ChordEvent] = []
    for position, (start, chord) in enumerate(starts):
        if position + 1 < len(starts):
            end = starts[position + 1][0]
        else:
            end = bar_start
        events.append(ChordEvent(chord=chord, start_beat=start, duration=end - start))
    return events


def meter_changes(song: Song) -> list[tuple[Fraction, int]]:
    """
    Time signature changes as ``(start_beat, beats)``.

    The first bar always produces an entry; later bars only when their beat
    count differs from the bar before.
    """
    changes: list[tuple[Fraction, int]] = []
    bar_start = Fraction(0)
    for section in song.sections:
        for bar in section.bars:
            if not changes or changes[-1][1] != bar.beats:
                changes.append((bar_start, bar.beats))
            bar_start += bar.beats
    return changes
