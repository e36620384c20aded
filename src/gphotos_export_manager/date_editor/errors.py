"""Error classes for the date editor."""

from gphotos_export_manager.common import GPExportError, ConfigurationError, ParseError


class DateEditorError(GPExportError):
    """Base error for date editor operations."""
    pass


class MissingSidecarError(DateEditorError):
    """A file of the edit list has no sidecar to take its dates from."""
    pass


class DateRepairError(DateEditorError):
    """Writing the dates of one file failed."""
    pass


__all__ = [
    'DateEditorError',
    'ConfigurationError',
    'ParseError',
    'MissingSidecarError',
    'DateRepairError',
]
