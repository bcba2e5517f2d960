"""MidiExporter: Converts VoicedChord events into a 2-track MIDI file."""

from fractions import Fraction

from midiutil import MIDIFile

from chordchart.voicing_strategy import VoicedChord

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
# Note data written to track 0 is ignored by most players and notation apps.
TRACK_CONDUCTOR = 0  # Tempo/time signature only, never receives notes
TRACK_RH = 1         # Chords: top staff, treble clef
TRACK_LH = 2         # Bass: bottom staff, bass clef

# General MIDI channel assignments
CHANNEL_RH = 0
CHANNEL_LH = 1

QUARTER_NOTE_DENOMINATOR = 2  # MIDI stores the denominator as a power of two
CLOCKS_PER_TICK = 24
MAX_NUMERATOR = 255          # Numerator is stored in a single byte

# (start beat, beats per bar)
MeterChange = tuple[Fraction, int]


class MidiExporter:
    """
    Writes a two-track MIDI file from a list of VoicedChord events.

    Track layout (Format 1, 3 internal tracks)
    ------------------------------------------
    Track 0: conductor track (tempo/time signature only, no notes)
    Track 1: "Chords", the notes produced by the VoicingStrategy.
    Track 2: "Bass", left-hand bass notes (empty for TriadVoicer).

    Timing
    ------
    Event start times and durations are already in quarter-note beats
    (see chord_timeline), so they are written unchanged.
    """

    DEFAULT_TEMPO = 100    # BPM
    DEFAULT_VELOCITY = 80  # MIDI velocity for chord notes (0-127)
    BASS_VELOCITY = 68     # Slightly softer bass notes

    def __init__(
        self,
        tempo: int = DEFAULT_TEMPO,
        velocity: int = DEFAULT_VELOCITY,
    ) -> None:
        """
        Args:
            tempo:    Playback tempo in beats per minute.
            velocity: MIDI note-on velocity for chord notes.
        """
        self.tempo = tempo
        self.velocity = velocity

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        voiced_chords: list[VoicedChord],
        meters: list[MeterChange] | None = None,
    ) -> MIDIFile:
        """
        Assemble the MIDIFile in memory.

        Args:
            voiced_chords: Events to write.
            meters:        Time signature changes as (start beat, beats per bar).
                           Defaults to 4/4 from the start.

        Raises:
            ValueError: If a bar has more beats than a MIDI time signature holds.
        """
        if meters is None:
            meters = [(Fraction(0), 4)]
        for start, beats in meters:
            if beats > MAX_NUMERATOR:
                raise ValueError(
                    f"Bar at beat {start} has {beats} beats; MIDI allows at most {MAX_NUMERATOR}."
                )

        midi = MIDIFile(numTracks=3, removeDuplicates=False, deinterleave=False)

        midi.addTempo(TRACK_CONDUCTOR, 0, self.tempo)
        for start, beats in meters:
            midi.addTimeSignature(
                TRACK_CONDUCTOR, float(start), beats, QUARTER_NOTE_DENOMINATOR, CLOCKS_PER_TICK
            )
        midi.addTrackName(TRACK_RH, 0, "Chords")
        midi.addTrackName(TRACK_LH, 0, "Bass")

        for vc in voiced_chords:
            start_beat = float(vc.event.start_beat)
            duration_beats = float(vc.event.duration)
            if duration_beats <= 0:
                continue

            for pitch in vc.left_hand_notes:
                midi.addNote(
                    track=TRACK_LH,
                    channel=CHANNEL_LH,
                    pitch=pitch,
                    time=start_beat,
                    duration=duration_beats,
                    volume=self.BASS_VELOCITY,
                )

            for pitch in vc.right_hand_notes:
                midi.addNote(
                    track=TRACK_RH,
                    channel=CHANNEL_RH,
                    pitch=pitch,
                    time=start_beat,
                    duration=duration_beats,
                    volume=self.velocity,
                )
        return midi

    def export(
        self,
        voiced_chords: list[VoicedChord],
        output_path: str,
        meters: list[MeterChange] | None = None,
    ) -> None:
        """
        Render voiced chords to a Standard MIDI File (SMF format 1).

        Raises:
            ValueError: If a meter cannot be written (see build()).
            OSError: If the output file cannot be opened for writing.
        """
        midi = self.build(voiced_chords, meters)
        with open(output_path, "wb") as f:
            midi.writeFile(f)
