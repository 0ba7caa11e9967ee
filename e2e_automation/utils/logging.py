"""Console logging for test runs.

All framework modules log through the standard ``logging`` package with a
module-level logger. ``configure_logging`` routes records to a single rich
console so that log lines from hooks, steps and page objects share one
serialized output stream. Two extra levels mirror how test output is read:
STEP for scenario/step progress and SUCCESS for passed checks.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.theme import Theme

STEP = 22
SUCCESS = 25

logging.addLevelName(STEP, "STEP")
logging.addLevelName(SUCCESS, "SUCCESS")

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "blue",
        "logging.level.step": "magenta",
        "logging.level.success": "bold green",
        "logging.level.warning": "yellow",
        "logging.level.error": "bold red",
        "header": "bold cyan",
    }
)

console = Console(theme=_THEME)


def configure_logging(
    level: Union[int, str, None] = None,
    logfile: Union[str, Path, None] = None,
) -> None:
    """Configure root logging for a test run.

    Args:
        level: Logging level; falls back to the LOG_LEVEL environment
            variable, then INFO
        logfile: Optional path that also receives plain-text log lines
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.strip().upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Re-configuring must not duplicate output
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )
    root_logger.addHandler(rich_handler)

    if logfile:
        logfile = Path(logfile)
        logfile.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root_logger.addHandler(file_handler)


def log_step(logger: logging.Logger, message: str) -> None:
    """Log scenario or step progress."""
    logger.log(STEP, message)


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a passed check or completed action."""
    logger.log(SUCCESS, message)


def log_header(title: str) -> None:
    """Print a boxed section header."""
    console.print()
    console.print(Panel(title, style="header", expand=True))


def log_separator() -> None:
    """Print a horizontal rule."""
    console.rule(style="dim")
