"""End-to-end organizer run: discover, reconcile, materialize."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .album_discovery import discover_album_paths
from .config import OrganizerConfig
from .errors import ConfigurationError
from .materializer import AssetMaterializer, MaterializationReport
from .reconciler import ReconciliationResult, reconcile_assets
from .tool_checker import video_tools_available

logger = logging.getLogger(__name__)


@dataclass
class OrganizeResult:
    """Everything an organizer run reports."""
    reconciliation: ReconciliationResult
    materialization: MaterializationReport


def require_input_dir(config: OrganizerConfig) -> Path:
    if not config.input_dir:
        raise ConfigurationError("No input directory given (-i/--input)")
    return Path(config.input_dir)


def prepare_output_dir(config: OrganizerConfig) -> Path:
    """Validate the output directory and create it if missing.

    Raises:
        ConfigurationError: If no output directory is given or it is a file
    """
    if not config.output_dir:
        raise ConfigurationError("No output directory given (-o/--output)")

    output_dir = Path(config.output_dir)
    if output_dir.exists() and not output_dir.is_dir():
        raise ConfigurationError(f"Output path is not a directory: {output_dir}", path=str(output_dir))

    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def build_asset_map(config: OrganizerConfig) -> ReconciliationResult:
    """Discover albums and reconcile their files into the asset map.

    Raises:
        ConfigurationError: For a bad input directory or export sub-path
        DuplicateSidecarError: In strict mode
    """
    album_paths = discover_album_paths(require_input_dir(config), config.export_sub_path)
    return reconcile_assets(
        album_paths,
        year_album_prefix=config.year_album_prefix,
        edited_suffix=config.edited_suffix,
        metadata_file_name=config.metadata_file_name,
        strict=config.strict,
    )


def organize(config: OrganizerConfig, video_gps_enabled: Optional[bool] = None) -> OrganizeResult:
    """Run the whole organizer pipeline.

    Args:
        config: Organizer configuration
        video_gps_enabled: Write video locations; None checks for ffprobe/ffmpeg

    Returns:
        OrganizeResult with reconciliation and materialization counters

    Raises:
        ConfigurationError: Before anything is copied, for bad paths
        ConflictError: In strict mode
    """
    reconciliation = build_asset_map(config)
    prepare_output_dir(config)

    if video_gps_enabled is None:
        video_gps_enabled = video_tools_available()

    materializer = AssetMaterializer.from_config(config, video_gps_enabled=video_gps_enabled)
    report = materializer.materialize_all(reconciliation.assets)

    return OrganizeResult(reconciliation=reconciliation, materialization=report)
