"""VoicingStrategy: Strategy pattern for mapping chord events to MIDI note sets."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from chordchart.chord_notation import Chord, Quality
from chordchart.chord_timeline import ChordEvent

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4 in Scientific Pitch Notation


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a pitch class (0-11) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


def root_pitch_class(chord: Chord) -> int:
    """Pitch class of the chord root with its accidental applied (Cb -> 11)."""
    return (chord.note.pitch_class + chord.accidental.offset) % SEMITONES_PER_OCTAVE


@dataclass
class VoicedChord:
    """
    A chord event annotated with concrete MIDI note assignments.

    Attributes:
        event:            The ChordEvent (chord and timing).
        right_hand_notes: MIDI note numbers for the chord tones (treble track).
        left_hand_notes:  MIDI note numbers for the bass (bass track).
                          Empty for TriadVoicer.
    """

    event: ChordEvent
    right_hand_notes: list[int] = field(default_factory=list)
    left_hand_notes: list[int] = field(default_factory=list)


# ── Interval tables ─────────────────────────────────────────────────────────

#: Semitones above the root for every quality. Extensions are stacked on the
#: seventh chord they imply.
QUALITY_INTERVALS: dict[Quality, list[int]] = {
    Quality.MAJ: [0, 4, 7],
    Quality.MIN: [0, 3, 7],
    Quality.DOM7: [0, 4, 7, 10],
    Quality.MAJ7: [0, 4, 7, 11],
    Quality.MIN7: [0, 3, 7, 10],
    Quality.DIM: [0, 3, 6],
    Quality.DIM7: [0, 3, 6, 9],
    Quality.HALF_DIM: [0, 3, 6, 10],
    Quality.AUG: [0, 4, 8],
    Quality.DOM9: [0, 4, 7, 10, 14],
    Quality.MAJ9: [0, 4, 7, 11, 14],
    Quality.MIN9: [0, 3, 7, 10, 14],
    Quality.FLAT9: [0, 4, 7, 10, 13],
    Quality.SHARP9: [0, 4, 7, 10, 15],
    Quality.MAJ11: [0, 4, 7, 11, 14, 17],
    Quality.SHARP11: [0, 4, 7, 10, 18],
    Quality.DOM13: [0, 4, 7, 10, 21],
    Quality.MAJ13: [0, 4, 7, 11, 21],
    Quality.FLAT13: [0, 4, 7, 10, 20],
    Quality.SUS: [0, 5, 7],
    Quality.SUS4: [0, 5, 7],
    Quality.SUS2: [0, 2, 7],
    Quality.MAJ6: [0, 4, 7, 9],
    Quality.MIN6: [0, 3, 7, 9],
}


# ── Abstract base ────────────────────────────────────────────────────────────

class VoicingStrategy(ABC):
    """
    Abstract Strategy for assigning MIDI pitches to a chart chord.

    Concrete subclasses implement ``voice()`` to produce different note
    layouts.
    """

    RH_OCTAVE = 4  # Right hand: C4 = MIDI 60

    def _get_intervals(self, quality: Quality) -> list[int]:
        return QUALITY_INTERVALS[quality]

    def _right_hand(self, chord: Chord) -> list[int]:
        root_midi = pitch_class_to_midi(root_pitch_class(chord), self.RH_OCTAVE)
        return [root_midi + iv for iv in self._get_intervals(chord.quality)]

    @abstractmethod
    def voice(self, event: ChordEvent) -> VoicedChord:
        """Map a ChordEvent to a VoicedChord with concrete MIDI note numbers."""


# ── Concrete strategies ──────────────────────────────────────────────────────

class TriadVoicer(VoicingStrategy):
    """Root-position chord tones from the Middle C octave, right hand only."""

    def voice(self, event: ChordEvent) -> VoicedChord:
        return VoicedChord(
            event=event,
            right_hand_notes=self._right_hand(event.chord),
            left_hand_notes=[],
        )


class BassVoicer(VoicingStrategy):
    """
    Chord tones (RH) plus a single bass note (LH) one octave lower.

    The bass is the slash ("over") note when the chord has one, otherwise
    the root. The over note carries no accidental of its own.
    """

    LH_OCTAVE = 3  # Left hand: C3 = MIDI 48

    def voice(self, event: ChordEvent) -> VoicedChord:
        chord = event.chord
        if chord.bass is not None:
            bass_pc = chord.bass.pitch_class
        else:
            bass_pc = root_pitch_class(chord)

        return VoicedChord(
            event=event,
            right_hand_notes=self._right_hand(chord),
            left_hand_notes=[pitch_class_to_midi(bass_pc, self.LH_OCTAVE)],
        )
