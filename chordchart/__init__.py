"""chordchart: a terminal editor for lead-sheet chord charts."""

__version__ = "0.1.0"
