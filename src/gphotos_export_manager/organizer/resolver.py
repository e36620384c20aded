"""Conflict resolution: one album and one file variant per asset."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Collection, List, Optional

from .reconciler import AssetEntry, AssetInstance

logger = logging.getLogger(__name__)

# More instances than this means the asset sits in too many albums to pick one
MAX_CANDIDATES = 2

ALBUM_DIR_NAME = "Album"
NO_ALBUM_DIR_NAME = "No Album"


class SkipReason(str, Enum):
    """Why an asset is not materialized."""

    NO_META = "no_meta"
    NO_ALBUM = "no_album"
    TOO_MANY_ALBUMS = "too_many_albums"


@dataclass
class Resolution:
    """Outcome of resolving one asset entry.

    Attributes:
        key: Asset key
        meta_path: Sidecar of the asset, if any
        chosen: Instance to materialize, if any
        candidates: Instances left after removing ignored albums
        skip_reasons: Every suitability rule the asset violates
    """
    key: str
    meta_path: Optional[Path]
    chosen: Optional[AssetInstance]
    candidates: List[AssetInstance]
    skip_reasons: List[SkipReason] = field(default_factory=list)

    @property
    def suitable(self) -> bool:
        return not self.skip_reasons


def resolve_asset(key: str, entry: AssetEntry, ignore_albums: Collection[str]) -> Resolution:
    """Pick the album and file variant of an asset.

    Instances from ignored albums are dropped. If any remaining instance is
    an edited variant only edited variants stay eligible, and the first
    inserted eligible instance wins. Since year albums are scanned last,
    that favors a named album over a year album.
    """
    candidates = [i for i in entry.asset_instances if i.album not in ignore_albums]
    eligible = [i for i in candidates if i.edited] or candidates
    chosen = eligible[0] if eligible else None

    resolution = Resolution(key=key, meta_path=entry.meta_path, chosen=chosen, candidates=candidates)

    if entry.meta_path is None:
        resolution.skip_reasons.append(SkipReason.NO_META)
        instances = [{'album': i.album, 'path': str(i.path), 'edited': i.edited} for i in entry.asset_instances]
        logger.warning(f"No meta: {{'key': {key!r}, 'instances': {instances}}}")

    if chosen is None:
        resolution.skip_reasons.append(SkipReason.NO_ALBUM)
        meta = str(entry.meta_path) if entry.meta_path else None
        logger.warning(f"No album: {{'key': {key!r}, 'meta': {meta!r}}}")

    if len(candidates) > MAX_CANDIDATES:
        resolution.skip_reasons.append(SkipReason.TOO_MANY_ALBUMS)
        instances = [{'album': i.album, 'path': str(i.path)} for i in candidates]
        meta = str(entry.meta_path) if entry.meta_path else None
        logger.warning(
            f"{key} is in {len(candidates)} albums: {{'instances': {instances}, 'meta': {meta!r}}}"
        )

    return resolution


def destination_dir(output_dir: Path, album: str, year_album_prefix: str) -> Path:
    """Folder a resolved asset is copied into.

    Named albums go to <output>/Album/<album>; year albums hold photos that
    belong to no real album and go to <output>/No Album.
    """
    if not album.startswith(year_album_prefix):
        return output_dir / ALBUM_DIR_NAME / album
    return output_dir / NO_ALBUM_DIR_NAME
