"""Tests for the gphotos-dates command."""

import json
from datetime import datetime
from unittest.mock import AsyncMock, patch

import piexif

from gphotos_export_manager.date_editor import cli
from gphotos_export_manager.organizer.metadata.exif_writer import write_dates_file
from gphotos_export_manager.settings import Settings

from tests.conftest import write_jpeg, write_sidecar

TAKEN = 1577934245


def write_to_edit(path, mapping):
    path.write_text(json.dumps(mapping), encoding="utf-8")
    return path


class TestPrepareCommand:
    """Tests for prepare_command."""

    def test_writes_edit_list(self, takeout_root, tmp_path):
        album = takeout_root("Holiday")
        write_jpeg(album / "A.jpg")
        write_sidecar(album / "A.jpg.json", photo_taken_time=TAKEN, creation_time=1600000000)
        to_edit = write_to_edit(tmp_path / "toEdit.json", {"2020-01-02": ["A-bearbeitet.jpg"]})
        edit_list = tmp_path / "edit.json"

        exit_code = cli.prepare_command(
            Settings(),
            organizer_overrides={'input_dir': str(takeout_root.input_dir)},
            date_editor_overrides={'to_edit_path': str(to_edit), 'edit_list_path': str(edit_list)},
        )

        assert exit_code == 0
        assert json.loads(edit_list.read_text(encoding="utf-8")) == [
            {"file": "A-bearbeitet.jpg", "date": "2020-01-02", "photoTakenTime": TAKEN, "creationTime": 1600000000}
        ]

    def test_missing_to_edit(self, takeout_root, tmp_path):
        takeout_root("Holiday")

        exit_code = cli.prepare_command(
            Settings(),
            organizer_overrides={'input_dir': str(takeout_root.input_dir)},
            date_editor_overrides={'to_edit_path': str(tmp_path / "toEdit.json")},
        )

        assert exit_code == 1

    def test_missing_sidecar_strict(self, takeout_root, tmp_path):
        album = takeout_root("Holiday")
        write_jpeg(album / "A.jpg")
        to_edit = write_to_edit(tmp_path / "toEdit.json", {"2020-01-02": ["A.jpg"]})

        exit_code = cli.prepare_command(
            Settings(),
            organizer_overrides={'input_dir': str(takeout_root.input_dir), 'strict': True},
            date_editor_overrides={'to_edit_path': str(to_edit), 'edit_list_path': str(tmp_path / "edit.json")},
        )

        assert exit_code == 3
        assert not (tmp_path / "edit.json").exists()


class TestApplyCommand:
    """Tests for apply_command."""

    def test_repairs_jpeg(self, tmp_path):
        write_jpeg(tmp_path / "2020-01-02" / "A.jpg")
        edit_list = tmp_path / "edit.json"
        edit_list.write_text(json.dumps([
            {"file": "A.jpg", "date": "2020-01-02", "photoTakenTime": TAKEN, "creationTime": None},
        ]), encoding="utf-8")

        exit_code = cli.apply_command(Settings(), {'edit_list_path': str(edit_list), 'base_dir': str(tmp_path)})

        assert exit_code == 0
        exif = piexif.load(str(tmp_path / "2020-01-02" / "A.jpg"))["Exif"]
        expected = datetime.fromtimestamp(TAKEN).strftime("%Y:%m:%d %H:%M:%S").encode()
        assert exif[piexif.ExifIFD.DateTimeOriginal] == expected

    def test_per_file_failures_keep_exit_code(self, tmp_path):
        edit_list = tmp_path / "edit.json"
        edit_list.write_text(json.dumps([
            {"file": "missing.jpg", "date": "2020-01-02", "photoTakenTime": TAKEN, "creationTime": None},
        ]), encoding="utf-8")

        exit_code = cli.apply_command(Settings(), {'edit_list_path': str(edit_list), 'base_dir': str(tmp_path)})

        assert exit_code == 0

    def test_missing_edit_list(self, tmp_path):
        exit_code = cli.apply_command(Settings(), {'edit_list_path': str(tmp_path / "edit.json")})
        assert exit_code == 1

    def test_invalid_concurrency(self, tmp_path):
        exit_code = cli.apply_command(Settings(), {'max_concurrent_tools': 0})
        assert exit_code == 1


class TestInspectCommand:
    """Tests for inspect_command."""

    def test_prints_tags_and_capture_date(self, tmp_path, capsys):
        path = write_jpeg(tmp_path / "A.jpg")
        write_dates_file(path, original="2020:01:02 03:04:05", digitized="2020:01:02 03:04:05")

        with patch.object(cli, "read_capture_date", new=AsyncMock(return_value=datetime(2020, 1, 2, 3, 4, 5))):
            exit_code = cli.inspect_command(path)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "- Exif" in out
        assert "    - DateTimeOriginal: 2020:01:02 03:04:05" in out
        assert "Capture date: 2020-01-02T03:04:05" in out

    def test_missing_file(self, tmp_path):
        assert cli.inspect_command(tmp_path / "nope.jpg") == 1


class TestMain:
    """Tests for main."""

    def test_prepare_then_apply(self, takeout_root, tmp_path, isolated_config, restore_logging):
        album = takeout_root("Holiday")
        write_jpeg(album / "A.jpg")
        write_sidecar(album / "A.jpg.json", photo_taken_time=TAKEN)
        to_edit = write_to_edit(tmp_path / "toEdit.json", {"2020-01-02": ["A.jpg"]})
        edit_list = tmp_path / "edit.json"
        sorted_dir = tmp_path / "sorted"
        write_jpeg(sorted_dir / "2020-01-02" / "A.jpg")

        assert cli.main([
            "--config", str(isolated_config), "prepare",
            "-i", str(takeout_root.input_dir), "--to-edit", str(to_edit), "--edit-list", str(edit_list),
        ]) == 0
        assert cli.main([
            "--config", str(isolated_config), "apply",
            "--edit-list", str(edit_list), "--base-dir", str(sorted_dir),
        ]) == 0

        exif = piexif.load(str(sorted_dir / "2020-01-02" / "A.jpg"))["Exif"]
        assert piexif.ExifIFD.DateTimeOriginal in exif

    def test_bad_config(self, tmp_path, isolated_config, restore_logging):
        isolated_config.write_text('[date_editor]\nmax_concurrent_tools = 0\n', encoding='utf-8')
        assert cli.main(["--config", str(isolated_config), "inspect", str(tmp_path / "x.jpg")]) == 1
