"""Logging setup for the dice game CLI."""

from __future__ import annotations

import logging
import sys


def configure_logging(level: int | str = logging.WARNING) -> None:
    """Configure default logging if no handlers are present.

    Logs go to stderr so they never interleave with the game transcript on stdout.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
