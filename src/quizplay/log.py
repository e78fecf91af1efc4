from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", *, no_color: bool = False) -> None:
    """Route stdlib logging through rich on stderr."""

    console = Console(stderr=True, color_system=None if no_color else "auto")
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
