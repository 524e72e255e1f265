"""
Logging configuration for the command line and web entry points.

Library modules only call logging.getLogger(__name__); handlers are
installed here, once, by whoever runs the program.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


LOG_LEVEL_ENV = "WEBPDF_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the webpdf logger.

    Args:
        level: Log level name. Defaults to $WEBPDF_LOG_LEVEL, then INFO.
        log_file: Optional file receiving DEBUG and above.
        console: Rich console for terminal output (stderr by default).

    Returns:
        The configured "webpdf" logger.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    numeric = getattr(logging, level_name, None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level_name}")

    logger = logging.getLogger("webpdf")
    logger.setLevel(logging.DEBUG if log_file else numeric)

    # Avoid stacking handlers when called more than once
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(numeric)
    logger.addHandler(rich_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    # Third-party libraries are noisy at INFO
    logging.getLogger("readability").setLevel(logging.WARNING)
    logging.getLogger("fontTools").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logger
