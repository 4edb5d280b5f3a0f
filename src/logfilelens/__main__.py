"""Allow running as ``python -m logfilelens``."""

from .cli import app

app(prog_name="logfilelens")
