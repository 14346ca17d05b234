"""Logging configuration."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from mcp_sheets_io import config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Handlers added by the last setup_logging call, replaced on the next one
_installed_handlers: List[logging.Handler] = []


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Console output goes to stderr: stdout carries the MCP stdio transport.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Defaults to LOG_LEVEL.
        log_file: Optional path of a file to append logs to. Defaults to LOG_FILE.
    """
    level_name = (log_level or config.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    log_file = log_file or config.LOG_FILE

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    # discovery_cache warns on every build() without oauth2client
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
