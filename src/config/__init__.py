"""
Configuration Package

Contains configuration utilities:
- settings: Environment-driven runtime settings
- logger: Logging setup with file rotation
- exception: Application exception hierarchy
"""

from src.config.settings import Settings, get_settings
from src.config.logger import setup_logger
from src.config.exception import (
    AppException,
    FatalStageError,
    GatewayError,
    ParseError,
    error_message_detail,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logger",
    "AppException",
    "FatalStageError",
    "GatewayError",
    "ParseError",
    "error_message_detail",
]
