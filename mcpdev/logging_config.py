"""
Logging setup for mcpdev.

All output goes to stderr (or an optional file). Stdout carries the MCP
protocol stream and must never receive log lines.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "mcpdev"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = {
    "fastmcp": logging.ERROR,
    "mcp": logging.ERROR,
    "asyncio": logging.WARNING,
}


def get_logger(name: str) -> logging.Logger:
    """Return the ``mcpdev.<name>`` logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    debug: bool = False,
) -> logging.Logger:
    """Configure the mcpdev logger hierarchy.

    Args:
        level: Level for mcpdev loggers
        log_file: Optional file that receives the same records
        debug: Keep third-party loggers at their own levels

    Returns:
        The root mcpdev logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG if debug else level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False

    if not debug:
        for name, noisy_level in _NOISY_LOGGERS.items():
            logging.getLogger(name).setLevel(noisy_level)

    return root
