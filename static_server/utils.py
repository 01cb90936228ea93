#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Utility Module for the Static File Server
-----------------------------------------
Contains helper functions used throughout the server:
- Logging setup with colored console output
- MIME type lookup from a static extension table
"""

import os
import logging
from logging.handlers import RotatingFileHandler

import colorama
from colorama import Fore, Style

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_MIME_TYPE = 'application/octet-stream'

# Extension (lower case, without the dot) to Content-Type
MIME_TYPES = {
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
    'svg': 'image/svg+xml',
    'pdf': 'application/pdf',
    'json': 'application/json',
    'xml': 'application/xml',
    'css': 'text/css',
    'js': 'application/javascript',
    'txt': 'text/plain; charset=utf-8',
    'bin': 'application/octet-stream',
}


class ColoredFormatter(logging.Formatter):
    """Formatter that colors console output by log level."""

    FORMATS = {
        logging.DEBUG: Fore.CYAN + LOG_FORMAT + Style.RESET_ALL,
        logging.INFO: Fore.GREEN + LOG_FORMAT + Style.RESET_ALL,
        logging.WARNING: Fore.YELLOW + LOG_FORMAT + Style.RESET_ALL,
        logging.ERROR: Fore.RED + LOG_FORMAT + Style.RESET_ALL,
        logging.CRITICAL: Fore.RED + Style.BRIGHT + LOG_FORMAT + Style.RESET_ALL
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        formatter = logging.Formatter(log_fmt, datefmt=LOG_DATE_FORMAT)
        return formatter.format(record)


def setup_logging(log_level='INFO', log_file=None, max_size=10485760, backup_count=5, use_colored_logging=True):
    """
    Set up logging configuration.

    Args:
        log_level: Logging level (default: INFO)
        log_file: Log file path (default: None, console only)
        max_size: Maximum log file size in bytes (default: 10MB)
        backup_count: Number of backup logs to keep (default: 5)
        use_colored_logging: Whether to use colored logging in console (default: True)

    Returns:
        logging.Logger: Root logger instance
    """
    log_level_value = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_value)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_file:
        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_size,
                backupCount=backup_count
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Error setting up log file {log_file}: {e}")

    console_handler = logging.StreamHandler()
    if use_colored_logging:
        colorama.init()
        console_handler.setFormatter(ColoredFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger.addHandler(console_handler)
    return root_logger


def file_extension(filepath):
    """
    Get the extension of a path without the leading dot.

    Args:
        filepath: Path to the file

    Returns:
        str: Extension, or None if the final component has none
    """
    ext = os.path.splitext(os.path.basename(filepath))[1]
    return ext[1:] if ext else None


def get_mime_type(extension):
    """
    Get the MIME type for a file extension.

    Args:
        extension: Extension without the dot (any case)

    Returns:
        str: MIME type, application/octet-stream when unknown
    """
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)
