import os
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from common.log_context import GroupContextFilter
from common.time_utils import KYIV_TZ

LOG_FILENAME = "api.log"


def custom_time(*args):
    """Returns current time in Kyiv timezone for logging."""
    return datetime.now(KYIV_TZ).timetuple()


def setup_logging(name: str, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Setup logging with:
    1. StreamHandler (stdout)
    2. TimedRotatingFileHandler (daily rotation, keep 7 days) if log_dir is provided
    3. Kyiv time and group id context in every line
    4. Log level from LOG_LEVEL environment variable

    Pass name="" to configure the root logger, so module loggers
    (common.*, yasno.*) share the same handlers.
    """
    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s EET | %(group_id)s%(levelname)s:%(name)s:%(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    formatter.converter = custom_time

    group_filter = GroupContextFilter()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(group_filter)

    # Remove existing handlers to avoid duplicates
    if logger.handlers:
        logger.handlers.clear()

    logger.addHandler(stream_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        filename = log_path / LOG_FILENAME

        try:
            file_handler = logging.handlers.TimedRotatingFileHandler(
                filename=filename,
                when='midnight',
                interval=1,
                backupCount=7,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.addFilter(group_filter)
            file_handler.suffix = "%Y-%m-%d"  # api.log.2025-10-27
            logger.addHandler(file_handler)
        except (PermissionError, OSError) as e:
            print(f"Error setting up file logging to {filename}: {e}. Continuing with console logging only.", file=sys.stderr)

    # aiohttp access noise
    logging.getLogger('aiohttp.access').setLevel(logging.WARNING)

    return logger
