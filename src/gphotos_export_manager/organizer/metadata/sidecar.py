"""Parser for Google Takeout JSON sidecar files."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import ParseError
from .geo_data import GPSData

logger = logging.getLogger(__name__)


@dataclass
class SidecarMetadata:
    """Fields of a sidecar the organizer and date editor consume.

    Attributes:
        geo_data: Location from geoData, zeros when absent
        photo_taken_time: photoTakenTime.timestamp in Unix seconds
        creation_time: creationTime.timestamp in Unix seconds
        title: Original file name as recorded by Google Photos
    """
    geo_data: GPSData = field(default_factory=GPSData)
    photo_taken_time: Optional[int] = None
    creation_time: Optional[int] = None
    title: Optional[str] = None


def parse_sidecar(json_path: Path) -> SidecarMetadata:
    """Parse a Google Takeout JSON sidecar.

    Args:
        json_path: Path to the sidecar

    Returns:
        SidecarMetadata with missing fields left at their defaults

    Raises:
        ParseError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {json_path}: {e}", path=str(json_path)) from e
    except OSError as e:
        raise ParseError(f"Failed to read {json_path}: {e}", path=str(json_path)) from e

    if not isinstance(data, dict):
        raise ParseError(f"Sidecar is not a JSON object: {json_path}", path=str(json_path))

    return SidecarMetadata(
        geo_data=_parse_geo_data(data.get('geoData'), json_path),
        photo_taken_time=_parse_timestamp(data.get('photoTakenTime'), 'photoTakenTime', json_path),
        creation_time=_parse_timestamp(data.get('creationTime'), 'creationTime', json_path),
        title=data.get('title'),
    )


def _parse_timestamp(value: Any, field_name: str, json_path: Path) -> Optional[int]:
    """Read {"timestamp": "1234567890"} into Unix seconds."""
    if not isinstance(value, dict) or 'timestamp' not in value:
        return None
    try:
        return int(value['timestamp'])
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid timestamp in sidecar: {{'path': {str(json_path)!r}, 'field': {field_name!r}, 'value': {value['timestamp']!r}}}"
        )
        return None


def _parse_geo_data(value: Any, json_path: Path) -> GPSData:
    """Read geoData; absent or malformed components count as zero."""
    if not isinstance(value, dict):
        return GPSData()

    components: Dict[str, float] = {}
    for name in ('latitude', 'longitude', 'altitude'):
        raw = value.get(name, 0.0)
        try:
            components[name] = float(raw)
        except (TypeError, ValueError):
            logger.warning(
                f"Invalid geoData component: {{'path': {str(json_path)!r}, 'field': {name!r}, 'value': {raw!r}}}"
            )
            components[name] = 0.0

    return GPSData(**components)
