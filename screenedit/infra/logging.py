# -*- coding: utf-8 -*-
"""
Logging configuration for the export engine
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_file: Optional[Union[str, Path]] = "screenedit.log",
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """Configures the root logger: full detail to the log file, warnings to stdout"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Calling twice (CLI + service) must not duplicate output
    for handler in list(root_logger.handlers):
        if getattr(handler, "_screenedit", False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        file_handler._screenedit = True
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)
    console_handler._screenedit = True
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Returns the logger for a component"""
    return logging.getLogger(f"screenedit.{name}")
