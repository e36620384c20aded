"""Tests for DateEditorConfig."""

import pytest
from pydantic import ValidationError

from gphotos_export_manager.date_editor.config import DateEditorConfig


class TestDateEditorConfig:
    """Tests for the date editor configuration model."""

    def test_defaults(self):
        config = DateEditorConfig()

        assert config.to_edit_path == "toEdit.json"
        assert config.edit_list_path == "edit.json"
        assert config.base_dir == "."
        assert config.max_concurrent_tools == 4
        assert config.exif_date_extensions == [".jpg", ".jpeg"]
        assert config.tool_date_extensions == [".png", ".mp4", ".mov"]
        assert config.ignored_date_extensions == [".gif"]

    def test_extensions_normalized(self):
        config = DateEditorConfig(tool_date_extensions=["PNG", ".Mp4"], ignored_date_extensions="gif")

        assert config.tool_date_extensions == [".png", ".mp4"]
        assert config.ignored_date_extensions == [".gif"]

    def test_max_concurrent_must_be_positive(self):
        with pytest.raises(ValidationError):
            DateEditorConfig(max_concurrent_tools=0)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            DateEditorConfig(exif_extensions=[".jpg"])

    def test_path_variables_expanded(self, monkeypatch):
        monkeypatch.setenv("HOME", "/home/tester")
        monkeypatch.setenv("USERPROFILE", "/home/tester")

        config = DateEditorConfig(base_dir="${USER_HOME}/sorted")

        assert "${USER_HOME}" not in config.base_dir
        assert config.base_dir.endswith("sorted")
