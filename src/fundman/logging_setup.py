"""Central logging configuration.

:func:`setup_logging` configures the root logger for the command-line
entry points. It is safe to call multiple times; if logging is already
configured the function does nothing.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Configure the root logger with a stream handler and optional file handler."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
