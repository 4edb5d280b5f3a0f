"""Core logic for logfilelens."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Union

from .buffer import LookBehindBuffer
from .config import FILTER_REGEXES_KEY, ConfigurationError, LensConfig
from .filtering import FilterPattern, MatchResult, compile_patterns, evaluate_filter
from .output import LineRenderer


def read_lines(stream: TextIO) -> Iterator[str]:
    """Yield lines from a text stream without their trailing newline."""
    for line in stream:
        yield line.rstrip("\n")


@dataclass
class ScanReport:
    """Outcome of one scan.

    Attributes:
        lines_checked: Number of lines read
        tally: Pattern key -> number of lines that pattern was first to match,
            in registration order
        lines_dropped: Lines still in the look-behind buffer at end of input
            that were never printed
    """

    lines_checked: int = 0
    tally: dict[str, int] = field(default_factory=dict)
    lines_dropped: int = 0

    @property
    def lines_matched(self) -> int:
        return sum(self.tally.values())


class LensScanner:
    """
    Streaming match reporter with a look-behind/look-ahead context window.

    Lines that match a filter pattern are printed highlighted, preceded by up to
    ``lens_size`` buffered lines and followed by ``lens_size`` trailing lines.
    """

    def __init__(
        self,
        config: LensConfig,
        output: Optional[TextIO] = None,
        color: Optional[bool] = None,
        flush_on_close: bool = False,
    ):
        """
        Initialize the scanner.

        Args:
            config: Lens size and filter patterns
            output: Stream the report is written to (default: current stdout)
            color: Force ANSI styling on or off (default: only for terminals)
            flush_on_close: Print lines left in the look-behind buffer at end of input.
                           By default they are dropped.

        Raises:
            ConfigurationError: If no filter patterns are configured
            PatternCompileError: If a filter pattern is not a valid regular expression
        """
        if not config.filter_regexes:
            raise ConfigurationError(f"Missing setting: {FILTER_REGEXES_KEY}")

        self.config = config
        self.lens_size = config.lens_size
        self.filter_patterns: list[FilterPattern] = compile_patterns(config.filter_regexes)
        self.renderer = LineRenderer(output, color=color)
        self.flush_on_close = flush_on_close

        # Leading context, waiting for a match that needs it
        self.buffer = LookBehindBuffer(self.lens_size)

        self.look_ahead = 0  # Trailing context lines still to print
        self.line_num = 0  # Lines read so far (1-based number of the current line)
        self.tally: dict[str, int] = {}
        self.reset()

    def reset(self) -> None:
        """Clear all per-scan state."""
        self.buffer.clear()
        self.look_ahead = 0
        self.line_num = 0
        # Duplicate pattern keys collapse into one entry, first position kept
        self.tally = dict.fromkeys((p.key for p in self.filter_patterns), 0)

    def scan(self, path: Union[str, Path]) -> ScanReport:
        """
        Scan a file and print matches with their context.

        The file is opened for plain reading; no lock is taken, so other
        processes may keep appending to it.

        Raises:
            OSError: If the file cannot be opened or read
        """
        with open(path, encoding="utf-8-sig", errors="replace") as f:
            return self.process_lines(read_lines(f))

    def process_lines(self, lines: Iterable[str]) -> ScanReport:
        """
        Process an iterable of lines from a fresh state.

        Args:
            lines: Lines without trailing newline

        Returns:
            ScanReport for the processed lines
        """
        self.reset()
        for line in lines:
            self.process_line(line)
        return self.finish()

    def process_line(self, line: str) -> Optional[MatchResult]:
        """
        Process a single line.

        Returns:
            The MatchResult if a filter pattern matched the line, else None
        """
        self.line_num += 1

        match = evaluate_filter(line, self.filter_patterns)
        if match is not None:
            self.tally[match.key] += 1
            self._flush_buffer()
            self.renderer.render_line(line, self.line_num, match)
            self.look_ahead = self.lens_size
        elif self.look_ahead > 0:
            self.look_ahead -= 1
            self.renderer.render_line(line, self.line_num)
        else:
            self.buffer.append(line)

        return match

    def finish(self) -> ScanReport:
        """Handle the end of input and return the report."""
        if self.flush_on_close and len(self.buffer):
            # Buffered lines end at the last line read, not before the next one
            self._flush_buffer(self.line_num + 1)
        return self.report()

    def report(self) -> ScanReport:
        """Build a report from the current state (also valid mid-scan)."""
        return ScanReport(
            lines_checked=self.line_num,
            tally=dict(self.tally),
            lines_dropped=len(self.buffer),
        )

    def _flush_buffer(self, next_line_num: Optional[int] = None) -> None:
        """Print the look-behind buffer as numbered context and empty it.

        Args:
            next_line_num: Number of the line following the buffered ones
                          (default: the current line)
        """
        if next_line_num is None:
            next_line_num = self.line_num

        # A full window of context may not join up with earlier output
        if self.buffer.is_full:
            self.renderer.render_separator()

        first_line_num = next_line_num - len(self.buffer)
        for offset, text in enumerate(self.buffer.drain()):
            self.renderer.render_line(text, first_line_num + offset)
