"""
Logger module for mongo_ops.

This module provides a centralized logger that can be imported throughout the package
without causing circular import issues.
"""

import logging

# Module-level logger
logger: logging.Logger = logging.getLogger('mongo_ops')
logger.setLevel(logging.INFO)

def set_log_level(level: int | str) -> None:
    """Set the logging level for the package. Called by create_app with the LOG_LEVEL setting.

    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL (or their names)
    """
    logger.setLevel(level)
