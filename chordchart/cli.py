"""chordchart CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from chordchart import __version__
from chordchart.chart_exporter import SUPPORTED_FORMATS, ChartExporter
from chordchart.midi_exporter import MidiExporter
from chordchart.persistence import load_song
from chordchart.sheet_renderers import TextChartRenderer
from chordchart.song import Song

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(log_file: str | None, verbose: bool, allow_stderr: bool = True) -> None:
    """
    Route log records to *log_file*, or to stderr when allowed.

    The curses editor owns the terminal, so ``edit`` passes
    ``allow_stderr=False`` and logs nowhere unless a file is given.
    """
    level = logging.DEBUG if verbose else logging.INFO
    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)
    elif allow_stderr:
        logging.basicConfig(
            stream=sys.stderr,
            level=level if verbose else logging.WARNING,
            format=LOG_FORMAT,
        )


def _load_or_exit(path: str) -> Song:
    try:
        return load_song(path)
    except OSError as exc:
        click.echo(f"  ERROR: Could not read song file — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Not a chord chart — {exc}", err=True)
        sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordchart")
@click.option(
    "--log-file",
    default=None,
    metavar="PATH",
    envvar="CHORDCHART_LOG_FILE",
    help="Append log records to PATH (env: CHORDCHART_LOG_FILE).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug detail.")
@click.pass_context
def main(ctx: click.Context, log_file: str | None, verbose: bool) -> None:
    """chordchart — terminal editor for lead-sheet chord charts."""
    ctx.obj = {"log_file": log_file, "verbose": verbose}


# ── edit subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", required=False, type=click.Path(dir_okay=False))
@click.pass_context
def edit(ctx: click.Context, path: str | None) -> None:
    """
    Open the chart editor.

    PATH is loaded when it exists and becomes the target of a bare `:save`.

    \b
    Keys:
      A-G           type a chord (space/tab commit and advance)
      space, Right  next slot          Left   previous slot
      Tab, F4       next bar           F3     previous bar
      Up, Down      one row            s      next section
      ? !           toggle flags       Del    delete chord/bar/section
      PgUp, PgDn    finer/coarser subdivision
      :             command line (title, save, edit, print, new, quit)
    """
    from chordchart.editor import EditorSession
    from chordchart.tui import run_editor

    _configure_logging(ctx.obj["log_file"], ctx.obj["verbose"], allow_stderr=False)

    song = None
    if path is not None and Path(path).exists():
        song = _load_or_exit(path)
    session = EditorSession(song=song, filename=path)
    run_editor(session)


# ── export subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("song_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to the song file with the format's extension.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="html",
    show_default=True,
    help="Printable HTML, the plain text grid, or a block-chord MIDI file.",
)
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=MidiExporter.DEFAULT_TEMPO,
    show_default=True,
    help="Playback tempo in BPM (midi only).",
)
@click.option(
    "--bass/--no-bass",
    default=True,
    show_default=True,
    help="Add a left-hand bass track (midi only).",
)
@click.pass_context
def export(
    ctx: click.Context,
    song_file: str,
    output: str | None,
    output_format: str,
    tempo: int,
    bass: bool,
) -> None:
    """
    Export a saved chart as HTML, text or MIDI.

    \b
    Examples:
      chordchart export blues.json
      chordchart export blues.json --format text -o blues.txt
      chordchart export blues.json --format midi --tempo 140 --no-bass
    """
    _configure_logging(ctx.obj["log_file"], ctx.obj["verbose"])

    song = _load_or_exit(song_file)
    exporter = ChartExporter(output_format=output_format, tempo=tempo, with_bass=bass)
    resolved_output = output if output is not None else str(exporter.default_output_path(song, song_file))

    click.echo(f"chordchart v{__version__}")
    click.echo(f"  Song   : {song.title}")
    click.echo(f"  Format : {exporter.output_format}")
    click.echo(f"  Output : {resolved_output}")

    try:
        exporter.export(song, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"  ERROR: Could not export as {exporter.output_format} — {exc}", err=True)
        sys.exit(1)

    click.echo(f"Done!  Wrote '{resolved_output}'.")


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("song_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.pass_context
def show(ctx: click.Context, song_file: str) -> None:
    """Print a saved chart as a text grid."""
    _configure_logging(ctx.obj["log_file"], ctx.obj["verbose"])

    song = _load_or_exit(song_file)
    click.echo(TextChartRenderer().render(song), nl=False)
