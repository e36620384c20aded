"""Error classes for the takeout organizer."""

from gphotos_export_manager.common import (
    GPExportError,
    ConfigurationError,
    ParseError,
    ToolNotFoundError,
)


class OrganizerError(GPExportError):
    """Base error for organizer operations."""
    pass


class AlbumScanError(OrganizerError):
    """An album directory could not be listed."""
    pass


class MetadataWriteError(OrganizerError):
    """Embedding metadata into a copied file failed."""
    pass


class ConflictError(OrganizerError):
    """Ambiguous input that strict mode refuses to resolve silently."""
    pass


class DuplicateSidecarError(ConflictError):
    """A second sidecar was found for an asset key."""
    pass


class DestinationCollisionError(ConflictError):
    """Two assets were materialized to the same destination file."""
    pass


__all__ = [
    'OrganizerError',
    'ConfigurationError',
    'ParseError',
    'ToolNotFoundError',
    'AlbumScanError',
    'MetadataWriteError',
    'ConflictError',
    'DuplicateSidecarError',
    'DestinationCollisionError',
]
