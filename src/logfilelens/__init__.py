"""logfilelens - Highlight matching log lines with a window of surrounding context."""

from .config import ConfigurationError, LensConfig, load_config
from .filtering import PatternCompileError
from .lens import LensScanner, ScanReport

# Version is managed by hatch-vcs and set during build
try:
    from ._version import __version__
except ImportError:
    # Fallback for development installs without build
    __version__ = "0.0.0.dev0+unknown"

__all__ = [
    "ConfigurationError",
    "LensConfig",
    "LensScanner",
    "PatternCompileError",
    "ScanReport",
    "load_config",
    "__version__",
]
