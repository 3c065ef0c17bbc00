"""
Logger utility for the comfort service
Provides structured logging with console and optional file output
"""

import logging
import sys
from pathlib import Path


DEFAULT_CONFIG = {
    'level': 'INFO',
    'file': None,
    'console': True
}


class Logger:
    """Custom logger with console and file output"""

    def __init__(self, name="weatherwell", config=None):
        """
        Initialize logger

        Args:
            name: Logger name
            config: Configuration dictionary with logging settings
                    (level, file, console)
        """
        self.name = name
        self.logger = logging.getLogger(name)

        config = {**DEFAULT_CONFIG, **(config or {})}

        # Set logging level
        level = getattr(logging, str(config.get('level', 'INFO')).upper(), logging.INFO)
        self.logger.setLevel(level)

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        # Create formatters
        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        simple_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # File handler
        log_file = config.get('file')
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(detailed_formatter)
            self.logger.addHandler(file_handler)

        # Console handler
        if config.get('console', True):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(simple_formatter)
            self.logger.addHandler(console_handler)

    def debug(self, message, *args):
        """Log debug message"""
        self.logger.debug(message, *args)

    def info(self, message, *args):
        """Log info message"""
        self.logger.info(message, *args)

    def warning(self, message, *args):
        """Log warning message"""
        self.logger.warning(message, *args)

    def error(self, message, *args):
        """Log error message"""
        self.logger.error(message, *args)

    def exception(self, message, *args):
        """Log error message with traceback"""
        self.logger.exception(message, *args)


_loggers = {}


def get_logger(name="weatherwell", config=None):
    """
    Get or create a logger instance

    The first call for a name (or any call passing a config) configures its
    handlers; later calls without config reuse the existing instance.

    Args:
        name: Logger name
        config: Configuration dictionary

    Returns:
        Logger instance
    """
    if config is not None or name not in _loggers:
        _loggers[name] = Logger(name, config)
    return _loggers[name]
