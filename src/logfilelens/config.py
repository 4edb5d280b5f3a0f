"""Settings loading for logfilelens.

Settings come from a dotenv-style key-value file, overlaid by process
environment variables with the same (case-sensitive) names.
"""

import os
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values

LENS_SIZE_KEY = "LensSize"
FILTER_REGEXES_KEY = "FilterRegexes"
SETTING_KEYS = (LENS_SIZE_KEY, FILTER_REGEXES_KEY)

DEFAULT_LENS_SIZE = 0
PATTERN_SEPARATOR = ";"
DEFAULT_SETTINGS_FILE = "logfilelens.env"

_LENS_SIZE_PATTERN = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or unusable."""


@dataclass(frozen=True)
class LensConfig:
    """Settings consumed by the lens scanner.

    Attributes:
        lens_size: Number of context lines kept before and printed after a match
        filter_regexes: Pattern source strings, in evaluation order
    """

    lens_size: int = DEFAULT_LENS_SIZE
    filter_regexes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.lens_size < 0:
            raise ConfigurationError(f"{LENS_SIZE_KEY} must be non-negative, got {self.lens_size}")
        if not self.filter_regexes:
            raise ConfigurationError(f"Missing setting: {FILTER_REGEXES_KEY}")
        # Accept any sequence from callers but keep the stored value hashable
        object.__setattr__(self, "filter_regexes", tuple(self.filter_regexes))


def read_settings(settings_file: Optional[Union[str, Path]] = None) -> dict[str, str]:
    """Read the named settings from a settings file and the environment.

    Args:
        settings_file: dotenv-style file to read. When None, DEFAULT_SETTINGS_FILE
            is read if it exists in the current directory.

    Returns:
        Mapping of setting name to raw string value. Keys without a value are omitted.

    Raises:
        FileNotFoundError: If an explicitly given settings file does not exist
    """
    if settings_file is None:
        default = Path(DEFAULT_SETTINGS_FILE)
        path: Optional[Path] = default if default.is_file() else None
    else:
        path = Path(settings_file)
        if not path.is_file():
            raise FileNotFoundError(f"Settings file not found: {path}")

    settings: dict[str, str] = {}
    if path is not None:
        for key, value in dotenv_values(path, interpolate=False, encoding="utf-8").items():
            if value is not None:
                settings[key] = value

    # Environment wins over the file, like load_dotenv(override=False)
    for key in SETTING_KEYS:
        if key in os.environ:
            settings[key] = os.environ[key]

    return settings


def parse_lens_size(raw: Optional[str], warn: Callable[[str], None]) -> int:
    """Parse the lens size setting, falling back to DEFAULT_LENS_SIZE.

    A missing, non-integer or negative value is not fatal: a warning is
    passed to ``warn`` and the default is used. Only plain ASCII decimal
    integers are accepted: no digit separators, no other scripts' digits.
    """
    try:
        if raw is None:
            raise ValueError("missing")
        if not _LENS_SIZE_PATTERN.fullmatch(raw):
            raise ValueError(raw)
        value = int(raw)
        if value < 0:
            raise ValueError("negative")
    except ValueError:
        warn(
            f"Failed to parse setting '{LENS_SIZE_KEY}'. Using default value: {DEFAULT_LENS_SIZE}"
        )
        return DEFAULT_LENS_SIZE
    return value


def split_filter_regexes(raw: Optional[str]) -> tuple[str, ...]:
    """Split the pattern list setting on PATTERN_SEPARATOR.

    Pieces are kept verbatim, in order, including empty ones.

    Raises:
        ConfigurationError: If the setting is missing or blank
    """
    if raw is None or not raw.strip():
        raise ConfigurationError(f"Missing setting: {FILTER_REGEXES_KEY}")
    return tuple(raw.split(PATTERN_SEPARATOR))


def config_from_settings(
    settings: Mapping[str, str],
    warn: Callable[[str], None],
    lens_size: Optional[int] = None,
    filter_regexes: Optional[Iterable[str]] = None,
) -> LensConfig:
    """Build a LensConfig from raw settings, with optional explicit overrides.

    Args:
        settings: Raw key-value settings (see read_settings)
        warn: Receives non-fatal diagnostics
        lens_size: Overrides the LensSize setting when given
        filter_regexes: Overrides the whole FilterRegexes setting when non-empty

    Raises:
        ConfigurationError: If no filter patterns are configured
    """
    if lens_size is None:
        lens_size = parse_lens_size(settings.get(LENS_SIZE_KEY), warn)

    patterns = tuple(filter_regexes) if filter_regexes else ()
    if not patterns:
        patterns = split_filter_regexes(settings.get(FILTER_REGEXES_KEY))

    return LensConfig(lens_size=lens_size, filter_regexes=patterns)


def load_config(
    warn: Callable[[str], None],
    settings_file: Optional[Union[str, Path]] = None,
    lens_size: Optional[int] = None,
    filter_regexes: Optional[Iterable[str]] = None,
) -> LensConfig:
    """Read settings and build a LensConfig in one step.

    Args:
        warn: Receives non-fatal diagnostics (the caller decides where they go)
    """
    return config_from_settings(
        read_settings(settings_file),
        lens_size=lens_size,
        filter_regexes=filter_regexes,
        warn=warn,
    )
