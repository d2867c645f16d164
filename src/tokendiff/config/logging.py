"""Root logger setup for the ``tokendiff`` command line."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Send log records to stderr as ``time level [logger] message``.

    ``--verbose`` maps to DEBUG, which surfaces per-stage match and
    classification counts. ``force`` replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
