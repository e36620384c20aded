"""CLI command for organizing a takeout export into an album tree."""

import logging
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from gphotos_export_manager.common import setup_logging, ConfigLoader, GPExportError, LoggingConfig
from gphotos_export_manager.settings import Settings
from .config import OrganizerConfig
from .errors import ConfigurationError, ConflictError
from .workflow import organize

# Application name derived from the top-level package name
_package = __package__ or "gphotos_export_manager.organizer"
APP_NAME = _package.split('.')[0].replace('_', '-')

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_FATAL_ERROR = 2
EXIT_CONFLICT = 3


def apply_overrides(config: OrganizerConfig, overrides: Optional[Dict[str, Any]]) -> OrganizerConfig:
    """Return a validated copy of config with the non-None overrides applied."""
    updates = {key: value for key, value in (overrides or {}).items() if value is not None}
    if not updates:
        return config
    return OrganizerConfig.model_validate({**config.model_dump(), **updates})


def organize_command(settings: Settings, overrides: Optional[Dict[str, Any]] = None) -> int:
    """Organize a takeout export.

    Args:
        settings: Loaded configuration
        overrides: OrganizerConfig fields given on the command line

    Returns:
        Exit code: 0 success, 1 configuration error, 2 fatal error, 3 strict-mode conflict
    """
    logger_name = __package__ or __name__
    logger = logging.getLogger(logger_name)

    try:
        config = apply_overrides(settings.organizer, overrides)

        logger.info(f"Input directory: {config.input_dir}")
        logger.info(f"Output directory: {config.output_dir}")

        result = organize(config)

        summary = {
            'assets': len(result.reconciliation.assets),
            **result.materialization.as_dict(),
        }
        logger.info(f"Organize complete: {summary}")
        return EXIT_OK

    except (ConfigurationError, ValidationError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except ConflictError as e:
        logger.error(f"Conflict in strict mode: {e} {e.context}")
        return EXIT_CONFLICT
    except (GPExportError, OSError) as e:
        logger.exception(f"Organize failed: {e}")
        return EXIT_FATAL_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reorganize a Google Photos takeout export into an album tree with GPS metadata"
    )
    parser.add_argument(
        "-i", "--input",
        dest="input_dir",
        help="Directory containing one or more unzipped takeout archives"
    )
    parser.add_argument(
        "-o", "--output",
        dest="output_dir",
        help="Destination root for the reorganized tree"
    )
    parser.add_argument(
        "-y", "--yearAlbumPrefix",
        dest="year_album_prefix",
        help="Marker identifying auto-generated year albums (default: 'Photos from')"
    )
    parser.add_argument(
        "-ia", "--ignoreAlbums",
        dest="ignore_albums",
        nargs="*",
        help="Album names to exclude from candidacy"
    )
    parser.add_argument(
        "-e", "--exportSubPath",
        dest="export_sub_path",
        nargs="+",
        help="Path segments from an archive root down to the albums level (default: Takeout 'Google Fotos')"
    )
    parser.add_argument(
        "-ep", "--editedPrefix",
        dest="edited_suffix",
        help="Marker of an edited file variant (default: '-bearbeitet')"
    )
    parser.add_argument(
        "-m", "--metadataFileName",
        dest="metadata_file_name",
        help="Name of each album's aggregate metadata file (default: 'Metadaten.json')"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on duplicate sidecars and destination collisions"
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
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the gphotos-organize command."""
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

    overrides = {
        'input_dir': args.input_dir,
        'output_dir': args.output_dir,
        'year_album_prefix': args.year_album_prefix,
        'ignore_albums': args.ignore_albums,
        'export_sub_path': args.export_sub_path,
        'edited_suffix': args.edited_suffix,
        'metadata_file_name': args.metadata_file_name,
        'strict': args.strict,
    }
    return organize_command(settings, overrides)


if __name__ == "__main__":
    sys.exit(main())
