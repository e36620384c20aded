"""Album discovery across one or more unzipped takeout archives.

Every archive root below the input directory contains the same relative
sub-path (e.g. "Takeout/Google Fotos") down to the albums level. An album
that was split over several archives shows up once per archive; those
folders are merged into one logical album keyed by the folder name.
"""

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

AlbumPaths = Dict[str, List[Path]]


def find_archive_roots(input_dir: Path) -> List[Path]:
    """List the archive root directories below the input directory.

    Args:
        input_dir: Directory containing the unzipped archives

    Returns:
        Archive root directories in name order

    Raises:
        ConfigurationError: If input_dir is missing, not a directory, or holds no archive
    """
    if not input_dir.exists():
        raise ConfigurationError(
            f"Input directory does not exist: {input_dir}",
            path=str(input_dir),
        )

    if not input_dir.is_dir():
        raise ConfigurationError(
            f"Input path is not a directory: {input_dir}",
            path=str(input_dir),
        )

    roots = []
    for entry in sorted(input_dir.iterdir()):
        if entry.is_dir():
            roots.append(entry)
        else:
            logger.debug(f"Ignoring non-directory entry in input: {{'path': {str(entry)!r}}}")

    if not roots:
        raise ConfigurationError(
            f"No archive directories found in: {input_dir}",
            path=str(input_dir),
        )

    return roots


def discover_album_paths(input_dir: Path, export_sub_path: Sequence[str]) -> AlbumPaths:
    """Map every album name to the folders holding it across all archives.

    Args:
        input_dir: Directory containing the unzipped archives
        export_sub_path: Path segments from an archive root down to the albums level

    Returns:
        Mapping album name -> album folders, in archive iteration order

    Raises:
        ConfigurationError: If an archive does not contain the export sub-path
    """
    logger.info("Collecting all albums...")

    album_paths: AlbumPaths = {}

    for root in find_archive_roots(input_dir):
        albums_level = root.joinpath(*export_sub_path)
        if not albums_level.is_dir():
            raise ConfigurationError(
                f"Archive does not contain the export sub-path: {albums_level}\n"
                f"Check the --exportSubPath option.",
                archive=str(root),
                export_sub_path=list(export_sub_path),
            )

        logger.debug(f"Scanning archive: {{'path': {str(albums_level)!r}}}")

        for entry in sorted(albums_level.iterdir()):
            # Symlinked folders are not albums of this export
            if entry.is_symlink() or not entry.is_dir():
                logger.debug(f"Ignoring non-album entry: {{'path': {str(entry)!r}}}")
                continue
            album_paths.setdefault(entry.name, []).append(entry)

    merged = sum(1 for paths in album_paths.values() if len(paths) > 1)
    logger.info(
        f"Album discovery complete: {{'albums': {len(album_paths)}, 'split_over_archives': {merged}}}"
    )

    return album_paths
