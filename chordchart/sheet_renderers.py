"""Renderer implementations for chord chart output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod

from chordchart.chord_notation import format_chord
from chordchart.grid_layout import SECTION_OVERHEAD_ROWS, column_widths
from chordchart.navigation import CursorPos
from chordchart.song import Section, Song

EMPTY_CURSOR_BAR_MARK = "."


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class SheetRenderer(ABC):
    """Abstract chart renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, song: Song) -> str:
        """Render the song into a file content string."""


class TextChartRenderer(SheetRenderer):
    """
    Render the chart as the plain character grid the editor shows.

    ``lines()`` is shared with the curses frontend so the screen and the text
    export never disagree about layout.
    """

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render(self, song: Song) -> str:
        return "\n".join(line.rstrip() for line in self.lines(song)) + "\n"

    def lines(self, song: Song, cursor: CursorPos | None = None) -> list[str]:
        lines = [f"SONG: {song.title}", ""]
        for section_index, section in enumerate(song.sections):
            cursor_bar = None
            if cursor is not None and cursor.section == section_index:
                cursor_bar = cursor.bar
            lines.append(f"[{section.label}]")
            lines.extend(self._section_rows(section, cursor_bar))
            lines.extend([""] * (SECTION_OVERHEAD_ROWS - 1))
        return lines

    def _section_rows(self, section: Section, cursor_bar: int | None) -> list[str]:
        widths = column_widths(section)
        rows: list[str] = []
        row = ""
        for bar_index, bar in enumerate(section.bars):
            if bar_index % section.wrap == 0 and bar_index > 0:
                rows.append(row + "|")
                row = ""
            width = widths[bar_index % section.wrap]
            row += "|"
            for subdivision in range(bar.subdivision):
                chord = bar.chord_at(subdivision)
                if chord is not None:
                    row += format_chord(chord).ljust(width)
                elif bar_index == cursor_bar:
                    row += EMPTY_CURSOR_BAR_MARK.ljust(width)
                else:
                    row += " " * width
        rows.append(row + "|")
        return rows


class HtmlChartRenderer(SheetRenderer):
    """Render the chart into a self-contained HTML document for printing."""

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, song: Song) -> str:
        title_safe = _escape_html(song.title)
        heading = f"  <h1>{title_safe}</h1>\n" if song.title else ""
        sections = "\n".join(self.build_section(section) for section in song.sections)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    html {{
      font-size: 24px;
      font-family: sans-serif;
    }}
    .section {{
      width: 100%;
      display: flex;
      flex-wrap: wrap;
      gap: 2px 0;
    }}
    .bar {{
      display: flex;
      box-sizing: border-box;
      border-left: 1px solid black;
      padding: 2px;
    }}
    .bar.last {{
      border-right: 1px solid black;
    }}
    .sub {{
      display: flex;
    }}
    .repeats::after {{
      content: " :||";
    }}
    @media print {{
      .section {{
        page-break-inside: avoid;
      }}
    }}
  </style>
</head>
<body>
{heading}{sections}
</body>
</html>"""

    def build_section(self, section: Section) -> str:
        """One ``<h2>`` label plus a flex row of bars sized by ``wrap``."""
        label_class = ' class="repeats"' if section.repeats else ""
        parts = [f"  <h2{label_class}>{_escape_html(section.label)}</h2>", '  <div class="section">']
        last = len(section.bars) - 1
        for bar_index, bar in enumerate(section.bars):
            bar_class = "bar last" if bar_index == last else "bar"
            parts.append(
                f'    <div class="{bar_class}" style="width: calc(100%/{section.wrap});">'
            )
            for subdivision in range(bar.subdivision):
                chord = bar.chord_at(subdivision)
                text = _escape_html(format_chord(chord)) if chord is not None else ""
                parts.append(
                    f'      <div class="sub" style="width: calc(100%/{bar.subdivision});">'
                    f"{text}</div>"
                )
            parts.append("    </div>")
        parts.append("  </div>")
        return "\n".join(parts)
