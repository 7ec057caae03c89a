"""Logging setup: one rich handler on the root logger, writing to stderr."""

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def configure_logging(level: str | int = DEFAULT_LEVEL) -> None:
    """Route all log records through a single RichHandler on stderr.

    stdout stays reserved for command output (feed panels or XML).
    """
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # Per-request chatter from the HTTP stack is only useful when debugging.
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
