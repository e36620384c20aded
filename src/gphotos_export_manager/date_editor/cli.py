"""CLI command for repairing capture dates of sorted files.

Subcommands:
    prepare  toEdit.json + takeout sidecars -> edit.json
    apply    edit.json -> dates written into <base-dir>/<date>/<file>
    inspect  print the EXIF tags and capture date of one file
"""

import asyncio
import logging
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from gphotos_export_manager.common import setup_logging, ConfigLoader, GPExportError, LoggingConfig
from gphotos_export_manager.organizer.cli import apply_overrides
from gphotos_export_manager.organizer.errors import MetadataWriteError
from gphotos_export_manager.organizer.metadata.exif_debug import describe_exif
from gphotos_export_manager.organizer.metadata.exiftool import read_capture_date
from gphotos_export_manager.organizer.workflow import build_asset_map
from gphotos_export_manager.settings import Settings
from .config import DateEditorConfig
from .edit_list import build_edit_records, load_to_edit, read_edit_list, write_edit_list
from .errors import ConfigurationError, MissingSidecarError, ParseError
from .timestamp_repair import repair_dates

_package = __package__ or "gphotos_export_manager.date_editor"
APP_NAME = _package.split('.')[0].replace('_', '-')

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_FATAL_ERROR = 2
EXIT_CONFLICT = 3

logger = logging.getLogger(__package__ or __name__)


def _date_editor_config(settings: Settings, overrides: Optional[Dict[str, Any]]) -> DateEditorConfig:
    updates = {key: value for key, value in (overrides or {}).items() if value is not None}
    if not updates:
        return settings.date_editor
    return DateEditorConfig.model_validate({**settings.date_editor.model_dump(), **updates})


def prepare_command(
    settings: Settings,
    organizer_overrides: Optional[Dict[str, Any]] = None,
    date_editor_overrides: Optional[Dict[str, Any]] = None,
) -> int:
    """Build edit.json from toEdit.json and the takeout sidecars.

    Returns:
        Exit code: 0 success, 1 configuration error, 2 fatal error, 3 missing sidecar in strict mode
    """
    try:
        organizer_config = apply_overrides(settings.organizer, organizer_overrides)
        config = _date_editor_config(settings, date_editor_overrides)

        to_edit = load_to_edit(Path(config.to_edit_path))
        reconciliation = build_asset_map(organizer_config)
        records, _ = build_edit_records(
            to_edit,
            reconciliation.assets,
            edited_suffix=organizer_config.edited_suffix,
            strict=organizer_config.strict,
        )
        write_edit_list(records, Path(config.edit_list_path))
        return EXIT_OK

    except (ConfigurationError, ParseError, ValidationError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except MissingSidecarError as e:
        logger.error(f"Missing sidecar in strict mode: {e} {e.context}")
        return EXIT_CONFLICT
    except (GPExportError, OSError) as e:
        logger.exception(f"Prepare failed: {e}")
        return EXIT_FATAL_ERROR


def apply_command(settings: Settings, overrides: Optional[Dict[str, Any]] = None) -> int:
    """Write the dates of edit.json into the sorted files.

    Per-file failures are reported in the summary; they do not change the exit code.
    """
    try:
        config = _date_editor_config(settings, overrides)
        records = read_edit_list(Path(config.edit_list_path))
        report = asyncio.run(repair_dates(records, config))
    except (ConfigurationError, ParseError, ValidationError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except (GPExportError, OSError) as e:
        logger.exception(f"Apply failed: {e}")
        return EXIT_FATAL_ERROR

    for failure in report.failures:
        logger.warning(f"Not repaired: {{'path': {failure.path!r}, 'error': {failure.error!r}}}")
    return EXIT_OK


def inspect_command(file_path: Path) -> int:
    """Print EXIF tags (JPEG/PNG) and the capture date exiftool sees."""
    if not file_path.is_file():
        logger.error(f"File does not exist: {file_path}")
        return EXIT_CONFIG_ERROR

    try:
        for line in describe_exif(file_path):
            print(line)
    except MetadataWriteError:
        logger.info(f"No EXIF block readable: {{'path': {str(file_path)!r}}}")

    try:
        capture_date = asyncio.run(read_capture_date(file_path))
    except GPExportError as e:
        logger.warning(f"Capture date unavailable: {{'path': {str(file_path)!r}, 'error': {str(e)!r}}}")
        return EXIT_OK

    print(f"Capture date: {capture_date.isoformat() if capture_date else None}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Repair capture dates of sorted Google Photos files"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare = subparsers.add_parser("prepare", help="Build edit.json from toEdit.json and the sidecars")
    prepare.add_argument("-i", "--input", dest="input_dir", help="Directory containing the unzipped takeout archives")
    prepare.add_argument("-e", "--exportSubPath", dest="export_sub_path", nargs="+", help="Path segments down to the albums level")
    prepare.add_argument("-y", "--yearAlbumPrefix", dest="year_album_prefix", help="Marker of auto-generated year albums")
    prepare.add_argument("-ep", "--editedPrefix", dest="edited_suffix", help="Marker of an edited file variant")
    prepare.add_argument("-m", "--metadataFileName", dest="metadata_file_name", help="Aggregate album metadata file name")
    prepare.add_argument("--to-edit", dest="to_edit_path", help="Date bucket -> file names mapping (default: toEdit.json)")
    prepare.add_argument("--edit-list", dest="edit_list_path", help="Edit list to write (default: edit.json)")
    prepare.add_argument("--strict", action="store_true", default=None, help="Fail when a listed file has no sidecar")

    apply = subparsers.add_parser("apply", help="Write the dates of edit.json into the files")
    apply.add_argument("--edit-list", dest="edit_list_path", help="Edit list to read (default: edit.json)")
    apply.add_argument("--base-dir", dest="base_dir", help="Directory holding the <date>/<file> tree (default: .)")
    apply.add_argument("--max-concurrent", dest="max_concurrent_tools", type=int, help="Maximum parallel exiftool runs")

    inspect = subparsers.add_parser("inspect", help="Show EXIF tags and capture date of a file")
    inspect.add_argument("file", type=Path, help="File to inspect")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the gphotos-dates command."""
    args = build_parser().parse_args(argv)

    try:
        loader = ConfigLoader(app_name=APP_NAME, config_class=Settings)
        settings = loader.load(defaults_path=args.config)
        if args.log_level:
            settings.logging = LoggingConfig.model_validate({**settings.logging.model_dump(), 'level': args.log_level})
    except (ConfigurationError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(
        level=settings.logging.level,
        format=settings.logging.format,
        log_file=Path(settings.logging.file) if settings.logging.file else None,
    )

    if args.command == "prepare":
        return prepare_command(
            settings,
            organizer_overrides={
                'input_dir': args.input_dir,
                'export_sub_path': args.export_sub_path,
                'year_album_prefix': args.year_album_prefix,
                'edited_suffix': args.edited_suffix,
                'metadata_file_name': args.metadata_file_name,
                'strict': args.strict,
            },
            date_editor_overrides={
                'to_edit_path': args.to_edit_path,
                'edit_list_path': args.edit_list_path,
            },
        )
    if args.command == "apply":
        return apply_command(
            settings,
            overrides={
                'edit_list_path': args.edit_list_path,
                'base_dir': args.base_dir,
                'max_concurrent_tools': args.max_concurrent_tools,
            },
        )
    return inspect_command(args.file)


if __name__ == "__main__":
    sys.exit(main())
