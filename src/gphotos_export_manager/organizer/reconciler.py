"""Asset reconciliation.

Walks every album folder once and groups the scattered files of one logical
asset (original, edited variant, sidecar, copies in other albums) under a
single asset key. Insertion order of instances is album order, then file
order within an album; the resolver relies on it, so albums are visited in
a fixed priority order and directory listings are sorted.
"""

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .album_discovery import AlbumPaths
from .asset_keys import AssetKeyNormalizer, is_sidecar
from .errors import AlbumScanError, DuplicateSidecarError

logger = logging.getLogger(__name__)


@dataclass
class AssetInstance:
    """One physical media file of a logical asset."""
    path: Path
    album: str
    file_name: str
    edited: bool = False


@dataclass
class AssetEntry:
    """Everything known about one asset key.

    Attributes:
        meta_path: First sidecar seen for the key; later ones never replace it
        asset_instances: Media files in discovery order
    """
    meta_path: Optional[Path] = None
    asset_instances: List[AssetInstance] = field(default_factory=list)


@dataclass
class ReconciliationStats:
    """Diagnostic counters of one reconciliation pass."""
    albums_scanned: int = 0
    album_scan_errors: int = 0
    files_scanned: int = 0
    found_meta: int = 0
    double_meta: int = 0
    edited: int = 0
    edited_sidecars: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class ReconciliationResult:
    """Asset map plus the counters collected while building it."""
    assets: Dict[str, AssetEntry]
    stats: ReconciliationStats


def order_albums(album_paths: AlbumPaths, year_album_prefix: str) -> List[Tuple[str, List[Path]]]:
    """Order albums so that year albums are scanned last.

    The sort is stable, so albums of the same kind keep discovery order.
    """
    return sorted(album_paths.items(), key=lambda item: year_album_prefix in item[0])


def list_album_files(album: str, paths: Sequence[Path], metadata_file_name: str) -> List[Path]:
    """List the files of an album across all its folders.

    The album's aggregate metadata file is excluded by exact name.

    Raises:
        AlbumScanError: If one of the folders cannot be listed
    """
    files: List[Path] = []
    for folder in paths:
        try:
            entries = sorted(folder.iterdir())
        except OSError as e:
            raise AlbumScanError(
                f"Failed to list album folder {folder}: {e}",
                album=album,
                path=str(folder),
            ) from e

        for entry in entries:
            if entry.name == metadata_file_name:
                continue
            if entry.is_dir():
                logger.debug(f"Ignoring nested folder in album: {{'album': {album!r}, 'path': {str(entry)!r}}}")
                continue
            files.append(entry)
    return files


def reconcile_assets(
    album_paths: AlbumPaths,
    year_album_prefix: str,
    edited_suffix: str,
    metadata_file_name: str,
    strict: bool = False,
) -> ReconciliationResult:
    """Build the asset key -> asset entry map.

    Args:
        album_paths: Output of album discovery
        year_album_prefix: Marker of auto-generated year albums
        edited_suffix: Marker of edited variants
        metadata_file_name: Aggregate album metadata file to skip
        strict: Raise on a second sidecar for the same key instead of counting it

    Returns:
        ReconciliationResult with the asset map and counters

    Raises:
        DuplicateSidecarError: In strict mode, when a key has two sidecars
    """
    logger.info("Collecting asset to album assignments...")

    assets: Dict[str, AssetEntry] = {}
    stats = ReconciliationStats()

    for album, paths in order_albums(album_paths, year_album_prefix):
        logger.debug(f"Scraping album: {{'album': {album!r}, 'folders': {len(paths)}}}")

        try:
            files = list_album_files(album, paths, metadata_file_name)
        except AlbumScanError as e:
            stats.album_scan_errors += 1
            logger.error(f"Skipping unreadable album: {{'album': {album!r}, 'path': {e.context.get('path')!r}, 'error': {str(e)!r}}}")
            continue

        stats.albums_scanned += 1
        normalizer = AssetKeyNormalizer.from_file_names((f.name for f in files), edited_suffix)

        for file_path in files:
            file_name = file_path.name
            is_meta = is_sidecar(file_name)
            key = normalizer.normalize(file_name)
            edited = normalizer.is_edited(file_name)
            stats.files_scanned += 1

            entry = assets.setdefault(key, AssetEntry())

            if is_meta:
                stats.found_meta += 1
                if edited:
                    stats.edited_sidecars += 1
                    logger.debug(f"Edited asset with sidecar: {{'key': {key!r}, 'path': {str(file_path)!r}}}")

                if entry.meta_path is None:
                    entry.meta_path = file_path
                    continue

                stats.double_meta += 1
                if strict:
                    raise DuplicateSidecarError(
                        f"Asset {key!r} has more than one sidecar: {entry.meta_path} and {file_path}",
                        key=key,
                        kept=str(entry.meta_path),
                        duplicate=str(file_path),
                    )
                logger.warning(
                    f"Duplicate sidecar ignored: {{'key': {key!r}, 'kept': {str(entry.meta_path)!r}, 'ignored': {str(file_path)!r}}}"
                )
                continue

            if edited:
                stats.edited += 1
            entry.asset_instances.append(
                AssetInstance(path=file_path, album=album, file_name=file_name, edited=edited)
            )

    logger.info(f"Found {stats.found_meta} meta files.")
    logger.info(f"Found {stats.double_meta} double meta files.")
    logger.info(f"{stats.edited} assets are edited.")
    summary = {'assets': len(assets), **stats.as_dict()}
    logger.info(f"Reconciliation complete: {summary}")

    return ReconciliationResult(assets=assets, stats=stats)
