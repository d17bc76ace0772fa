from __future__ import annotations

import logging
import sys

from .config import LOG_FORMAT, LOG_LEVEL


def setup_logging(log_level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the API process or a CLI run."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
