"""Tool availability checker for external metadata tools."""

import shutil
import logging
from typing import Dict

logger = logging.getLogger(__name__)

# Tool name -> what it is used for
TOOL_CAPABILITIES = {
    'ffprobe': 'video container tag reading',
    'ffmpeg': 'video container tag writing',
    'exiftool': 'date tags of PNG and video files',
}


def check_tool_availability() -> Dict[str, bool]:
    """
    Check availability of the external metadata tools.

    Returns:
        Dictionary mapping tool names to availability status:
        - 'ffprobe', 'ffmpeg': video GPS writing
        - 'exiftool': date repair of non-JPEG files and capture date read-back
    """
    return {tool: shutil.which(tool) is not None for tool in TOOL_CAPABILITIES}


def video_tools_available() -> bool:
    """Whether both ffprobe and ffmpeg can be run; logs a warning otherwise."""
    tools = check_tool_availability()
    missing = [tool for tool in ('ffprobe', 'ffmpeg') if not tools[tool]]
    if missing:
        logger.warning(
            f"Video GPS writing disabled: {{'missing_tools': {missing}}}\n"
            f"{_get_installation_instructions(missing[0])}"
        )
        return False
    for tool in ('ffprobe', 'ffmpeg'):
        logger.info(f"Tool available: {{'tool': {tool!r}, 'capability': {TOOL_CAPABILITIES[tool]!r}}}")
    return True


def exiftool_available() -> bool:
    """Whether exiftool can be run; logs a warning with install instructions otherwise."""
    if check_tool_availability()['exiftool']:
        logger.info(f"Tool available: {{'tool': 'exiftool', 'capability': {TOOL_CAPABILITIES['exiftool']!r}}}")
        return True
    logger.warning(
        f"Date writing through exiftool disabled: {{'missing_tools': ['exiftool']}}\n"
        f"{_get_installation_instructions('exiftool')}"
    )
    return False


def _get_installation_instructions(tool_name: str) -> str:
    """Get installation instructions for a missing tool."""
    ffmpeg_instructions = (
        f"{tool_name} is part of FFmpeg. Install it:\n"
        "  - Windows: Download from https://ffmpeg.org/download.html\n"
        "  - macOS: brew install ffmpeg\n"
        "  - Linux: sudo apt-get install ffmpeg (Debian/Ubuntu)\n"
        "           sudo yum install ffmpeg (RHEL/CentOS)"
    )
    instructions = {
        'ffprobe': ffmpeg_instructions,
        'ffmpeg': ffmpeg_instructions,
        'exiftool': (
            "ExifTool writes dates into PNG and video files. Install it:\n"
            "  - Windows: Download from https://exiftool.org/\n"
            "  - macOS: brew install exiftool\n"
            "  - Linux: sudo apt-get install libimage-exiftool-perl"
        ),
    }

    return instructions.get(tool_name, f"Please install {tool_name}")
