"""ChartExporter: writes a Song as HTML, plain text or MIDI."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from chordchart.chord_timeline import meter_changes, song_timeline
from chordchart.midi_exporter import MidiExporter
from chordchart.sheet_renderers import HtmlChartRenderer, SheetRenderer, TextChartRenderer
from chordchart.song import Song
from chordchart.voicing_strategy import BassVoicer, TriadVoicer, VoicingStrategy

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: Final[set[str]] = {"html", "text", "midi"}
MIDI_EXTENSION: Final[str] = ".mid"


def title_to_filename(title: str, suffix: str) -> str:
    """Convert a song title to a safe filename with the given suffix.

    Strips characters that are invalid in filenames and collapses whitespace
    to underscores. Falls back to "untitled" when nothing is left.
    """
    sanitized = re.sub(r"[^\w\s-]", "", title)
    sanitized = re.sub(r"\s+", "_", sanitized.strip())
    return f"{sanitized or 'untitled'}{suffix}"


class ChartExporter:
    """
    Convert a Song into an output file via a pluggable renderer.

    Supported formats:
    - ``html``: printable self-contained HTML chart.
    - ``text``: the character grid shown by the editor.
    - ``midi``: block chords on a two-track Standard MIDI File.
    """

    def __init__(
        self,
        output_format: str = "html",
        tempo: int = MidiExporter.DEFAULT_TEMPO,
        with_bass: bool = True,
    ) -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.tempo = tempo
        self.with_bass = with_bass
        self.renderer = self._build_renderer(normalized)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> SheetRenderer | None:
        if output_format == "html":
            return HtmlChartRenderer()
        if output_format == "text":
            return TextChartRenderer()
        return None

    def _voicer(self) -> VoicingStrategy:
        return BassVoicer() if self.with_bass else TriadVoicer()

    def _export_midi(self, song: Song, output_path: str) -> None:
        voicer = self._voicer()
        voiced = [voicer.voice(event) for event in song_timeline(song)]
        exporter = MidiExporter(tempo=self.tempo)
        exporter.export(voiced, output_path, meter_changes(song))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def default_extension(self) -> str:
        if self.renderer is None:
            return MIDI_EXTENSION
        return self.renderer.default_extension

    def default_output_path(self, song: Song, source: str | Path | None = None) -> Path:
        """``<source stem>.<ext>`` beside the source file, or a name from the title."""
        if source is not None:
            return Path(source).with_suffix(self.default_extension)
        return Path(title_to_filename(song.title, self.default_extension))

    def export(self, song: Song, output_path: str | Path) -> Path:
        """
        Render the song in the selected format and write it to disk.

        Raises:
            ValueError: If the song cannot be expressed in the format (MIDI meters).
            OSError: If the output file cannot be written.
        """
        output_path = Path(output_path)
        if self.renderer is None:
            self._export_midi(song, str(output_path))
        else:
            content = self.renderer.render(song)
            with open(output_path, "w", encoding="utf-8") as fh:
                fh.write(content)
        logger.info("Exported '%s' as %s to %s", song.title, self.output_format, output_path)
        return output_path
