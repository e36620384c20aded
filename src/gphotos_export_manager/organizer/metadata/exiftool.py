"""Asynchronous ExifTool wrapper for formats the EXIF codec cannot handle."""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..errors import MetadataWriteError, ParseError, ToolNotFoundError

logger = logging.getLogger(__name__)

TOOL_TIMEOUT_SECONDS = 60

# Checked in this order when reading back a capture date
CAPTURE_DATE_TAGS = [
    'SubSecDateTimeOriginal',
    'DateTimeOriginal',
    'SubSecCreateDate',
    'CreationDate',
    'CreateDate',
    'SubSecMediaCreateDate',
    'MediaCreateDate',
    'DateTimeCreated',
]

_EXIF_DATETIME_FORMATS = [
    "%Y:%m:%d %H:%M:%S.%f%z",
    "%Y:%m:%d %H:%M:%S%z",
    "%Y:%m:%d %H:%M:%S.%f",
    "%Y:%m:%d %H:%M:%S",
]


async def run_exiftool(args: List[str], timeout: float = TOOL_TIMEOUT_SECONDS) -> str:
    """Run exiftool and return its stdout.

    Raises:
        ToolNotFoundError: If exiftool is not installed
        MetadataWriteError: If exiftool exits non-zero or times out
    """
    try:
        process = await asyncio.create_subprocess_exec(
            'exiftool', *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError("exiftool not found", tool='exiftool') from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise MetadataWriteError(f"exiftool timed out: {args}", args=args) from e

    if process.returncode != 0:
        message = stderr.decode('utf-8', errors='replace').strip()
        raise MetadataWriteError(f"exiftool failed ({process.returncode}): {message}", args=args)

    return stdout.decode('utf-8', errors='replace')


async def read_tags(file_path: Path) -> Dict[str, Any]:
    """Read all tags of a file as exiftool reports them.

    Raises:
        ParseError: If the JSON output cannot be parsed
    """
    output = await run_exiftool(['-json', str(file_path)])
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse exiftool output for {file_path}: {e}", path=str(file_path)) from e

    # One object per input file
    return data[0] if data else {}


async def write_tags(file_path: Path, tags: Mapping[str, str]) -> None:
    """Write tags in place (no _original backup copy)."""
    args = ['-overwrite_original']
    args.extend(f"-{name}={value}" for name, value in tags.items())
    args.append(str(file_path))
    await run_exiftool(args)
    logger.debug(f"exiftool wrote tags: {{'path': {str(file_path)!r}, 'tags': {dict(tags)}}}")


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an exiftool date string like '2020:01:02 03:04:05.67+01:00'."""
    if not isinstance(value, str):
        return None
    for fmt in _EXIF_DATETIME_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def first_capture_date(tags: Mapping[str, Any]) -> Optional[datetime]:
    """First parseable date among CAPTURE_DATE_TAGS."""
    for name in CAPTURE_DATE_TAGS:
        parsed = parse_exif_datetime(tags.get(name))
        if parsed is not None:
            return parsed
    return None


async def read_capture_date(file_path: Path) -> Optional[datetime]:
    """Capture date of a file as seen by exiftool, if any."""
    return first_capture_date(await read_tags(file_path))
