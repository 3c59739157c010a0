from __future__ import annotations

import logging
import sys
from typing import TextIO

from bddgen.core.logger import configure_structlog


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """Route structlog events through stdlib logging to ``stream`` (stderr by default).

    stdout is left to the command's own output, such as a rendered config.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream if stream is not None else sys.stderr,
        level=log_level,
    )
    configure_structlog()
