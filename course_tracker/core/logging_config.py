# /course-tracker/course_tracker/core/logging_config.py

import logging
from typing import Optional

from .. import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(log_level: Optional[str] = None, log_format: str = LOG_FORMAT) -> None:
    """
    Configures the root logger once for the whole process.

    Modules never configure handlers themselves; they only call
    `logging.getLogger(__name__)` and rely on this being run at start-up.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, (log_level or config.LOG_LEVEL).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    _configured = True
    logging.getLogger(__name__).info("Logging configured at level %s", logging.getLevelName(level))
