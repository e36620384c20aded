"""Container metadata read/write for videos using ffprobe and ffmpeg."""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Dict

from ..errors import MetadataWriteError, ParseError, ToolNotFoundError
from .geo_data import GPSData, format_location

logger = logging.getLogger(__name__)

TOOL_TIMEOUT_SECONDS = 120


def read_container_tags(file_path: Path) -> Dict[str, str]:
    """Read the format-level tags of a media container.

    Raises:
        ToolNotFoundError: If ffprobe is not installed
        ParseError: If ffprobe fails or returns unusable output
    """
    try:
        result = subprocess.run(
            [
                'ffprobe',
                '-v', 'quiet',
                '-print_format', 'json',
                '-show_format',
                str(file_path)
            ],
            capture_output=True,
            text=True,
            encoding='utf-8',
            check=True,
            timeout=TOOL_TIMEOUT_SECONDS
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError("ffprobe not found", tool='ffprobe') from e
    except subprocess.CalledProcessError as e:
        raise ParseError(f"ffprobe failed for {file_path}: {e.stderr}", path=str(file_path)) from e
    except subprocess.TimeoutExpired as e:
        raise ParseError(f"ffprobe timed out for {file_path}", path=str(file_path)) from e

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse ffprobe output for {file_path}: {e}", path=str(file_path)) from e

    tags = data.get('format', {}).get('tags', {})
    return {str(k): str(v) for k, v in tags.items()}


def write_container_tags(file_path: Path, tags: Dict[str, str]) -> None:
    """Rewrite a container with the given format-level tags.

    Streams are copied as-is into a temporary file next to the original,
    which then replaces it. On failure the original is left untouched.

    Raises:
        ToolNotFoundError: If ffmpeg is not installed
        MetadataWriteError: If ffmpeg fails
    """
    # Keep the suffix so ffmpeg picks the same muxer
    temp_path = file_path.with_name(f"{file_path.stem}.tagging{file_path.suffix}")

    command = ['ffmpeg', '-y', '-v', 'error', '-i', str(file_path), '-map', '0', '-map_metadata', '0', '-codec', 'copy']
    for key, value in tags.items():
        command.extend(['-metadata', f"{key}={value}"])
    command.append(str(temp_path))

    try:
        subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding='utf-8',
            check=True,
            timeout=TOOL_TIMEOUT_SECONDS
        )
        os.replace(temp_path, file_path)
    except FileNotFoundError as e:
        raise ToolNotFoundError("ffmpeg not found", tool='ffmpeg') from e
    except subprocess.CalledProcessError as e:
        raise MetadataWriteError(f"ffmpeg failed for {file_path}: {e.stderr}", path=str(file_path)) from e
    except subprocess.TimeoutExpired as e:
        raise MetadataWriteError(f"ffmpeg timed out for {file_path}", path=str(file_path)) from e
    finally:
        temp_path.unlink(missing_ok=True)


def add_gps_to_movie(file_path: Path, gps: GPSData) -> None:
    """Store the location of a video in its container 'location' tag.

    Raises:
        MetadataWriteError: If reading or writing the container fails
    """
    try:
        tags = read_container_tags(file_path)
    except ParseError as e:
        raise MetadataWriteError(f"Cannot read container tags: {e}", path=str(file_path)) from e

    tags['location'] = format_location(gps)
    write_container_tags(file_path, tags)
    logger.debug(f"Wrote container location: {{'path': {str(file_path)!r}, 'location': {tags['location']!r}}}")
