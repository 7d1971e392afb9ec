#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Logging configuration for command-line runs. Library modules only create loggers."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "rpc-codegen"
CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = '%(asctime)s | %(levelname)-7s | %(message)s'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """Configure console logging and, optionally, a rotating log file."""
    logging.basicConfig(level=logging.INFO, format=CONSOLE_FORMAT)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if log_file is not None and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # max 5MB, keep 3 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5*1024*1024,
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(file_handler)

    return logger
