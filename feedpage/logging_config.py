"""Logging setup."""

import logging

from rich.logging import RichHandler


def setup_logging(debug: bool = False) -> None:
    """Route log records through rich; INFO in debug mode, else WARNING."""
    level = logging.INFO if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=debug)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
