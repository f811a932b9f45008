"""Log output for the command line."""

from __future__ import annotations

import logging
from typing import Final

PACKAGE_LOGGER: Final[str] = "convmerge"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Route log records to stderr.

    Library loggers (SQLAlchemy among them) stay at WARNING. ``verbose`` lowers
    only the ``convmerge`` loggers to DEBUG, which adds one line per merged
    conversation.
    """

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.INFO)
