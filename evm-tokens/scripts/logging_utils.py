"""Logging setup shared by the evm-tokens command line."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Send log records to stderr; stdout carries the JSON payloads."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    return logging.getLogger("evm_tokens")
