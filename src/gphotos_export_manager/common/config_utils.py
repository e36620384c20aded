"""Configuration utilities."""

import tempfile
import platformdirs
from pathlib import Path


def expand_path_variables(path: str) -> str:
    """Expand ${VAR} variables in paths.

    Supported variables:
        ${USER_HOME}: User's home directory
        ${USER_DATA}: User data directory
        ${USER_PICTURES}: User pictures directory
        ${USER_DOWNLOADS}: User downloads directory
        ${TEMP}: Temporary directory

    Args:
        path: Path string with variables

    Returns:
        Expanded path string
    """
    if not isinstance(path, str):
        return path

    replacements = {
        "${USER_HOME}": str(Path.home()),
        "${USER_DATA}": platformdirs.user_data_dir(),
        "${USER_PICTURES}": platformdirs.user_pictures_dir(),
        "${USER_DOWNLOADS}": platformdirs.user_downloads_dir(),
        "${TEMP}": tempfile.gettempdir(),
    }

    for var, value in replacements.items():
        path = path.replace(var, value)

    return path


def normalize_extension(extension: str) -> str:
    """Lower-case an extension and make sure it has a leading dot."""
    extension = extension.strip().lower()
    if extension and not extension.startswith('.'):
        extension = f".{extension}"
    return extension
