"""
Logging Utilities Module

This module provides centralized logging configuration for the syslogview dashboard.
It offers console and rotating-file output with consistent formatting across all
components.

Functions:
    setup_logging: Configure logging with customizable output handlers and levels
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    file: Optional[str] = None,
    console: bool = True
):
    """
    Setup logging configuration for syslogview.

    The logging setup includes:
    - Configurable log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - Optional rotating file output (5 MiB per file, three backups) with
      automatic directory creation
    - Optional console output to stdout
    - Clearing of existing handlers to prevent duplicate logging

    Args:
        level (str): Log level as string (default: "INFO")
        file (Optional[str]): Path to log file. If None, no file logging is enabled.
        console (bool): Whether to enable console logging to stdout (default: True)

    Example:
        # File and console logging
        setup_logging(level="DEBUG", file="logs/syslogview.log", console=True)
    """
    # Clear existing handlers
    root = logging.getLogger()
    root.handlers.clear()

    log_level = getattr(logging, level.upper())
    root.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    if file:
        log_file = Path(file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    logging.getLogger(__name__).debug("Logging configured")
