"""Shared fixtures: small takeout trees and real image files."""

import json
from pathlib import Path
from typing import Dict, Optional

import pytest
from PIL import Image


def write_jpeg(path: Path, color: str = 'blue', size=(32, 24)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new('RGB', size, color=color).save(path, 'JPEG', quality=90)
    return path


def write_png(path: Path, color: str = 'red', size=(32, 24)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new('RGB', size, color=color).save(path, 'PNG')
    return path


def sidecar_data(
    latitude: float = 0.0,
    longitude: float = 0.0,
    altitude: float = 0.0,
    photo_taken_time: Optional[int] = 1577934245,
    creation_time: Optional[int] = 1600000000,
    title: str = "A.jpg",
) -> Dict:
    data = {
        "title": title,
        "geoData": {
            "latitude": latitude,
            "longitude": longitude,
            "altitude": altitude,
            "latitudeSpan": 0.0,
            "longitudeSpan": 0.0,
        },
    }
    if photo_taken_time is not None:
        data["photoTakenTime"] = {"timestamp": str(photo_taken_time), "formatted": ""}
    if creation_time is not None:
        data["creationTime"] = {"timestamp": str(creation_time), "formatted": ""}
    return data


def write_sidecar(path: Path, **kwargs) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(sidecar_data(**kwargs)), encoding='utf-8')
    return path


@pytest.fixture
def takeout_root(tmp_path):
    """Input directory holding one archive with the default export sub-path.

    Returns a function album(name, archive="takeout-001") -> album folder.
    """
    input_dir = tmp_path / "input"
    input_dir.mkdir()

    def album(name: str, archive: str = "takeout-001") -> Path:
        folder = input_dir / archive / "Takeout" / "Google Fotos" / name
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    album.input_dir = input_dir
    return album


@pytest.fixture
def restore_logging():
    """Undo the root logger changes a CLI main() makes."""
    import logging

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    """Config file path for CLI runs that ignores system and user config."""
    from gphotos_export_manager.common.config import ConfigLoader

    monkeypatch.setattr(ConfigLoader, "_load_system_config", lambda self: None)
    monkeypatch.setattr(ConfigLoader, "_load_user_config", lambda self: None)
    config_file = tmp_path / "defaults.toml"
    config_file.write_text('[logging]\nlevel = "INFO"\n', encoding='utf-8')
    return config_file
