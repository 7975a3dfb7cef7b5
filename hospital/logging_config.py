"""Operator log channel.

User-facing output is printed by the console driver; log records go to
stderr so they never mix with menu text on stdout.
"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """Configure the root logger for the console application.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        stream: Destination for log records, stderr by default
    """
    logging.basicConfig(
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
