"""
Logging Configuration Utility

Sets up logging for the AutoDialer with a rotating log file and a compact
console handler. A brute-force run logs every rotation, so the file handler
always rotates.
"""

import logging
import logging.handlers
import sys
import os


def setup_logging(level: str = "INFO",
                  log_file: str = "autodialer.log",
                  max_file_size_mb: float = 10.0,
                  backup_count: int = 5,
                  console_output: bool = True,
                  detailed_format: bool = False) -> bool:
    """
    Set up root logger handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path (empty to disable file logging)
        max_file_size_mb: Maximum log file size in MB before rotation
        backup_count: Number of backup files to keep
        console_output: Whether to output to console
        detailed_format: Use detailed log format with source locations

    Returns:
        bool: True if logging setup successful
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if detailed_format:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s() - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    try:
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=int(max_file_size_mb * 1024 * 1024),
                backupCount=backup_count
            )
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
    except OSError as e:
        print(f"Failed to setup logging: {e}")
        return False

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    logger.info(f"Logging initialized - Level: {level}, File: {log_file}")
    return True
