"""Filter patterns and first-match-wins line evaluation."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional


class PatternCompileError(ValueError):
    """Raised when a filter pattern is not a valid regular expression."""

    def __init__(self, pattern: str, error: re.error):
        super().__init__(f"Invalid filter pattern '{pattern}': {error}")
        self.pattern = pattern
        self.error = error


@dataclass(frozen=True)
class FilterPattern:
    """A compiled filter pattern.

    Patterns are evaluated sequentially. First match wins.
    """

    __slots__ = ["source", "regex"]
    source: str  # Original pattern string
    regex: re.Pattern[str]  # Compiled regex pattern

    @property
    def key(self) -> str:
        """Canonical pattern text, used as the tally key."""
        return self.regex.pattern


@dataclass(frozen=True)
class MatchResult:
    """Where a filter pattern matched within one line."""

    __slots__ = ["key", "position", "length"]
    key: str
    position: int
    length: int

    @property
    def end(self) -> int:
        return self.position + self.length


def compile_patterns(sources: Iterable[str]) -> list[FilterPattern]:
    """Compile pattern strings, preserving their order.

    Raises:
        PatternCompileError: On the first pattern that fails to compile
    """
    patterns = []
    for source in sources:
        try:
            compiled = re.compile(source)
        except re.error as e:
            raise PatternCompileError(source, e) from e
        patterns.append(FilterPattern(source=source, regex=compiled))
    return patterns


def evaluate_filter(line: str, filter_patterns: list[FilterPattern]) -> Optional[MatchResult]:
    """Evaluate filter patterns against a line.

    Args:
        line: The line to evaluate (without terminator)
        filter_patterns: Patterns in registration order

    Returns:
        MatchResult for the first pattern that matches anywhere in the line,
        or None if no pattern matches.
    """
    for filter_pattern in filter_patterns:
        m = filter_pattern.regex.search(line)
        if m:
            return MatchResult(
                key=filter_pattern.key, position=m.start(), length=m.end() - m.start()
            )

    return None
