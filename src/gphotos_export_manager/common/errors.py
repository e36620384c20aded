"""Base error definitions for gphotos_export_manager packages."""

from typing import Any, Dict


class GPExportError(Exception):
    """Base exception for all gphotos_export_manager errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(GPExportError):
    """Configuration is invalid or points at missing paths."""
    pass


class FileProcessingError(GPExportError):
    """Base exception for file processing errors."""
    pass


class ParseError(FileProcessingError):
    """Error parsing file metadata."""
    pass


class ToolNotFoundError(FileProcessingError):
    """Required external tool is not available."""
    pass
