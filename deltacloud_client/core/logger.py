"""
Centralized logging module for the Deltacloud client.
Provides file logging with rotation and console output for the CLI.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


LOGGER_NAME = 'deltacloud-client'


class Logger:
    """
    Centralized logger for the application.
    Configures both file and console logging with rotation.

    Library code only needs get_logger(); handlers are installed by
    initialize(), which the command-line front end calls once.
    """

    _instance: Optional['Logger'] = None
    _logger: Optional[logging.Logger] = None

    def __init__(self, log_file: Path, log_level: str = 'INFO',
                 max_size_mb: int = 10, backup_count: int = 5):
        """
        Initialize the logger.

        Args:
            log_file: Path to log file
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
            max_size_mb: Maximum log file size in MB before rotation
            backup_count: Number of backup files to keep
        """
        if Logger._instance is not None and Logger._logger is not None:
            return

        Logger._instance = self

        logger = logging.getLogger(LOGGER_NAME)
        level = getattr(logging, str(log_level).upper(), logging.INFO)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers.clear()

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        # stderr keeps command output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        Logger._logger = logger

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get the logger instance.

        Before initialize() has run this is the plain named logger, so
        applications embedding the client keep their own logging setup.
        """
        if cls._logger is None:
            return logging.getLogger(LOGGER_NAME)
        return cls._logger

    @classmethod
    def initialize(cls, log_file: Path, log_level: str = 'INFO',
                   max_size_mb: int = 10, backup_count: int = 5):
        """
        Initialize the logger (convenience method).

        Args:
            log_file: Path to log file
            log_level: Logging level
            max_size_mb: Maximum log file size in MB
            backup_count: Number of backup files to keep

        Returns:
            Logger instance
        """
        if cls._instance is not None:
            return cls._instance

        return cls(log_file, log_level, max_size_mb, backup_count)

    @classmethod
    def reset(cls) -> None:
        """Remove installed handlers so the logger can be initialized again."""
        if cls._logger is not None:
            for handler in list(cls._logger.handlers):
                handler.close()
                cls._logger.removeHandler(handler)
            cls._logger.propagate = True
        cls._instance = None
        cls._logger = None


def get_logger() -> logging.Logger:
    """
    Convenience function to get the logger.

    Returns:
        Configured logger instance
    """
    return Logger.get_logger()
