"""Logging setup for the exam-mixer command line."""

import logging
import sys
from pathlib import Path
from typing import Optional

# google-generativeai pulls in grpc/urllib3 chatter
QUIET_LOGGERS = ("google", "grpc", "urllib3")


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Print "[module] message" lines to stdout, and to `log_file` when given."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(name)s] %(message)s",
        handlers=handlers,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
