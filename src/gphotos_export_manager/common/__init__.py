"""Common utilities for gphotos_export_manager packages."""

from .config import ConfigLoader
from .config_utils import expand_path_variables, normalize_extension
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import (
    GPExportError, ConfigurationError, FileProcessingError, ParseError, ToolNotFoundError
)

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'expand_path_variables',
    'normalize_extension',
    'GPExportError',
    'ConfigurationError',
    'FileProcessingError',
    'ParseError',
    'ToolNotFoundError',
]
