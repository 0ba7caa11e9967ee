"""Utility functions and helpers."""

from .logging import (
    STEP,
    SUCCESS,
    configure_logging,
    log_header,
    log_separator,
    log_step,
    log_success,
)

__all__ = [
    "STEP",
    "SUCCESS",
    "configure_logging",
    "log_header",
    "log_separator",
    "log_step",
    "log_success",
]
