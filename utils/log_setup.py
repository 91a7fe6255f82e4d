"""
Logging Setup
Configures loguru sinks for the deployment scripts
"""

import os
import sys
from typing import Optional
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None):
    """
    Replace the default loguru sink

    Args:
        level: Console level (defaults to DEPLOY_LOG_LEVEL or INFO)
        log_file: Optional file sink path (defaults to DEPLOY_LOG_FILE, e.g. data/logs/deploy.log)
    """
    level = level or os.getenv('DEPLOY_LOG_LEVEL', 'INFO')
    log_file = log_file or os.getenv('DEPLOY_LOG_FILE')

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format=FILE_FORMAT,
            level="DEBUG"
        )
