"""Line rendering for scan output."""

from typing import TYPE_CHECKING, Optional, TextIO

import typer

from .filtering import MatchResult

if TYPE_CHECKING:
    from .lens import ScanReport

PLAIN_MARKER = " "
MATCH_MARKER = "!"

# Marker and matched span styles (click color names)
MARKER_STYLE = {"fg": "red", "bg": "white"}
MATCH_STYLE = {"fg": "red"}


class LineRenderer:
    """Writes numbered, optionally highlighted lines to a text stream.

    Styling goes through typer.style/typer.echo, so ANSI codes are dropped
    automatically when the stream is not a terminal. ``color`` forces styling
    on (True) or off (False).
    """

    def __init__(self, output: Optional[TextIO] = None, color: Optional[bool] = None):
        self.output = output  # None means the current sys.stdout
        self.color = color

    def render_line(
        self, text: str = "", line_nr: Optional[int] = None, match: Optional[MatchResult] = None
    ) -> None:
        """Write one line.

        Args:
            text: Raw line text (no terminator)
            line_nr: 1-based line number, right-aligned in a 4-character field
            match: Where to highlight; also switches the leading marker to MATCH_MARKER
        """
        parts = []
        if match is not None:
            parts.append(typer.style(MATCH_MARKER, **MARKER_STYLE))
        else:
            parts.append(PLAIN_MARKER)

        if line_nr is not None:
            parts.append(f"{line_nr:>4}: ")

        if match is not None:
            parts.append(text[: match.position])
            parts.append(typer.style(text[match.position : match.end], **MATCH_STYLE))
            parts.append(text[match.end :])
        else:
            parts.append(text)

        typer.echo("".join(parts), file=self.output, color=self.color)

    def render_separator(self) -> None:
        """Write the blank line that marks a gap between output blocks."""
        self.render_line()

    def render_summary(self, report: "ScanReport") -> None:
        """Write the end-of-run tally, one line per pattern in registration order."""
        self.render_line()
        self.render_line()
        self.render_line(f"LensMatch counts from {report.lines_checked} checked lines:")
        for key, count in report.tally.items():
            self.render_line(f"  {key}: {count}")
