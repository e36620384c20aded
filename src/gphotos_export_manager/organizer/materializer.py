"""Materialization of resolved assets into the output tree.

Each suitable asset is copied once into its album folder, then the
location from its sidecar is embedded: as EXIF tags for still images, as a
container tag for videos. A failed metadata write keeps the plain copy.
"""

import logging
import shutil
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Collection, Dict, Mapping, Optional

from gphotos_export_manager.common import LogContext
from .config import OrganizerConfig
from .errors import DestinationCollisionError, MetadataWriteError, ParseError, ToolNotFoundError
from .metadata.exif_writer import write_gps_file
from .metadata.geo_data import GPSData, geo_data_is_set
from .metadata.sidecar import parse_sidecar
from .metadata.video_metadata import add_gps_to_movie
from .progress import ProgressTracker
from .reconciler import AssetEntry
from .resolver import resolve_asset, destination_dir

logger = logging.getLogger(__name__)


@dataclass
class MaterializationReport:
    """Counters of one materialization run, reported once at the end."""
    total: int = 0
    materialized: int = 0
    no_meta: int = 0
    no_album: int = 0
    too_many_albums: int = 0
    geo_data_set: int = 0
    writing_exif_error: int = 0
    writing_video_error: int = 0
    gps_skipped: int = 0
    sidecar_errors: int = 0
    destination_collisions: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)

    def log_summary(self) -> None:
        logger.info(f"{self.geo_data_set} have gps data")
        logger.info(f"{self.writing_exif_error} have writing exif error")
        logger.info(f"{self.no_meta} have no metadata.")
        logger.info(f"{self.no_album} have no album.")
        logger.info(f"{self.too_many_albums} are in too many albums.")
        logger.info(f"Materialization summary: {self.as_dict()}")


class AssetMaterializer:
    """Resolves assets and writes them into the output tree.

    One instance handles one run: destination collisions are tracked across
    every asset passed to materialize_all.
    """

    def __init__(
        self,
        output_dir: Path,
        year_album_prefix: str,
        ignore_albums: Collection[str] = (),
        exif_gps_extensions: Collection[str] = (".jpg", ".jpeg", ".png"),
        video_gps_extensions: Collection[str] = (".mp4", ".mov"),
        altitude_max_denominator: int = 1000,
        strict: bool = False,
        video_gps_enabled: bool = True,
        progress_log_interval: int = 100,
    ):
        self.output_dir = output_dir
        self.year_album_prefix = year_album_prefix
        self.ignore_albums = frozenset(ignore_albums)
        self.exif_gps_extensions = frozenset(exif_gps_extensions)
        self.video_gps_extensions = frozenset(video_gps_extensions)
        self.altitude_max_denominator = altitude_max_denominator
        self.strict = strict
        self.video_gps_enabled = video_gps_enabled
        self.progress_log_interval = progress_log_interval

        # destination -> asset key that wrote it
        self._written: Dict[Path, str] = {}

    @classmethod
    def from_config(cls, config: OrganizerConfig, video_gps_enabled: bool = True) -> "AssetMaterializer":
        return cls(
            output_dir=Path(config.output_dir),
            year_album_prefix=config.year_album_prefix,
            ignore_albums=config.ignore_albums,
            exif_gps_extensions=config.exif_gps_extensions,
            video_gps_extensions=config.video_gps_extensions,
            altitude_max_denominator=config.altitude_max_denominator,
            strict=config.strict,
            video_gps_enabled=video_gps_enabled,
            progress_log_interval=config.progress_log_interval,
        )

    def materialize_all(self, assets: Mapping[str, AssetEntry]) -> MaterializationReport:
        """Process every asset in map order.

        Raises:
            DestinationCollisionError: In strict mode, when two assets share a destination file
        """
        report = MaterializationReport(total=len(assets))
        tracker = ProgressTracker(total_assets=len(assets), log_interval=self.progress_log_interval)
        self._written.clear()

        logger.info(f"Copying assets: {{'total': {len(assets)}, 'output_dir': {str(self.output_dir)!r}}}")

        for key, entry in assets.items():
            with LogContext(asset_key=key):
                self.materialize(key, entry, report)
            self._report_progress(tracker)

        tracker.log_final_summary()
        report.log_summary()
        return report

    def materialize(self, key: str, entry: AssetEntry, report: MaterializationReport) -> Optional[Path]:
        """Resolve one asset and, if suitable, copy it and embed its location.

        Returns:
            Destination path, or None if the asset was skipped
        """
        resolution = resolve_asset(key, entry, self.ignore_albums)
        if not resolution.suitable:
            for reason in resolution.skip_reasons:
                setattr(report, reason.value, getattr(report, reason.value) + 1)
            return None

        chosen = resolution.chosen
        target_dir = destination_dir(self.output_dir, chosen.album, self.year_album_prefix)
        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / chosen.file_name

        self._track_destination(key, destination, report)

        shutil.copyfile(chosen.path, destination)
        report.materialized += 1
        logger.debug(f"Copied asset: {{'source': {str(chosen.path)!r}, 'destination': {str(destination)!r}}}")

        try:
            metadata = parse_sidecar(resolution.meta_path)
        except ParseError as e:
            report.sidecar_errors += 1
            logger.error(
                f"Unreadable sidecar, keeping plain copy: {{'meta': {str(resolution.meta_path)!r}, 'error': {str(e)!r}}}"
            )
            return destination

        if geo_data_is_set(metadata.geo_data):
            report.geo_data_set += 1
            self._embed_location(chosen.path, destination, resolution.meta_path, metadata.geo_data, report)

        return destination

    def _track_destination(self, key: str, destination: Path, report: MaterializationReport) -> None:
        previous = self._written.get(destination)
        if previous is not None:
            report.destination_collisions += 1
            if self.strict:
                raise DestinationCollisionError(
                    f"Assets {previous!r} and {key!r} both materialize to {destination}",
                    destination=str(destination),
                    first=previous,
                    second=key,
                )
            logger.warning(
                f"Destination collision, overwriting: {{'destination': {str(destination)!r}, 'previous': {previous!r}, 'key': {key!r}}}"
            )
        self._written[destination] = key

    def _embed_location(
        self,
        source: Path,
        destination: Path,
        meta_path: Path,
        gps: GPSData,
        report: MaterializationReport,
    ) -> None:
        extension = destination.suffix.lower()

        if extension in self.exif_gps_extensions:
            try:
                write_gps_file(source, destination, gps, self.altitude_max_denominator)
            except MetadataWriteError as e:
                report.writing_exif_error += 1
                logger.error(
                    f"Error writing exif: {{'source': {str(source)!r}, 'meta': {str(meta_path)!r}, 'error': {str(e)!r}}}"
                )
            return

        if extension in self.video_gps_extensions and self.video_gps_enabled:
            try:
                add_gps_to_movie(destination, gps)
            except (MetadataWriteError, ToolNotFoundError) as e:
                report.writing_video_error += 1
                logger.error(
                    f"Error writing video location: {{'source': {str(source)!r}, 'meta': {str(meta_path)!r}, 'error': {str(e)!r}}}"
                )
            return

        report.gps_skipped += 1
        logger.info(f"Skipping gps data: {{'file': {destination.name!r}, 'extension': {extension!r}}}")

    def _report_progress(self, tracker: ProgressTracker) -> None:
        try:
            tracker.increment()
        except Exception as e:
            logger.warning(f"Progress reporting failed: {{'error': {str(e)!r}}}")
