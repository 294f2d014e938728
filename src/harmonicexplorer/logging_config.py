"""
Logging Configuration
Sets up the global logger for the application.

Playback, the fade out timer and WAV export each run on their own thread,
so every record carries the name of the thread that wrote it.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "harmonicexplorer"
LOG_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the root logger for the 'harmonicexplorer' namespace.

    Args:
        level: Console logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file. The file always
            receives DEBUG records, whatever the console level.

    Returns:
        The configured package logger.
    """
    # Get the logger for our package
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)
    logger.propagate = False

    # Check if handlers already exist to avoid duplicate logs during reload/restart
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Thread - Module - Level - Message
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    # 1. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized (console: {logging.getLevelName(level)}, file: {log_file or 'none'}).")
    return logger
