"""Tests for video container tag handling (ffprobe/ffmpeg mocked)."""

import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from gphotos_export_manager.organizer.errors import MetadataWriteError, ParseError, ToolNotFoundError
from gphotos_export_manager.organizer.metadata.geo_data import GPSData
from gphotos_export_manager.organizer.metadata.video_metadata import (
    add_gps_to_movie,
    read_container_tags,
    write_container_tags,
)

RUN = "gphotos_export_manager.organizer.metadata.video_metadata.subprocess.run"


def ffprobe_output(tags):
    return Mock(stdout=json.dumps({"format": {"tags": tags}}), returncode=0)


class TestReadContainerTags:
    """Tests for read_container_tags."""

    def test_reads_format_tags(self, tmp_path):
        with patch(RUN, return_value=ffprobe_output({"creation_time": "2020-01-01T00:00:00Z"})) as run:
            tags = read_container_tags(tmp_path / "a.mp4")

        assert tags == {"creation_time": "2020-01-01T00:00:00Z"}
        assert run.call_args[0][0][0] == "ffprobe"

    def test_no_tags(self, tmp_path):
        with patch(RUN, return_value=Mock(stdout=json.dumps({"format": {}}))):
            assert read_container_tags(tmp_path / "a.mp4") == {}

    def test_ffprobe_missing(self, tmp_path):
        with patch(RUN, side_effect=FileNotFoundError("ffprobe")):
            with pytest.raises(ToolNotFoundError):
                read_container_tags(tmp_path / "a.mp4")

    def test_ffprobe_failure(self, tmp_path):
        error = subprocess.CalledProcessError(1, ["ffprobe"], stderr="Invalid data")
        with patch(RUN, side_effect=error):
            with pytest.raises(ParseError):
                read_container_tags(tmp_path / "a.mp4")

    def test_bad_output(self, tmp_path):
        with patch(RUN, return_value=Mock(stdout="not json")):
            with pytest.raises(ParseError):
                read_container_tags(tmp_path / "a.mp4")


class TestWriteContainerTags:
    """Tests for write_container_tags."""

    def test_replaces_file_with_tagged_copy(self, tmp_path):
        """Test that ffmpeg output replaces the original."""
        video = tmp_path / "a.mp4"
        video.write_bytes(b"original")

        def fake_ffmpeg(command, **kwargs):
            with open(command[-1], "wb") as f:
                f.write(b"tagged")
            return Mock(returncode=0)

        with patch(RUN, side_effect=fake_ffmpeg) as run:
            write_container_tags(video, {"location": "+1.00000+2.00000+3.00000/"})

        command = run.call_args[0][0]
        assert command[0] == "ffmpeg"
        assert "location=+1.00000+2.00000+3.00000/" in command
        assert command[-1].endswith("a.tagging.mp4")
        assert video.read_bytes() == b"tagged"
        assert not (tmp_path / "a.tagging.mp4").exists()

    def test_failure_keeps_original(self, tmp_path):
        """Test that a failed ffmpeg run leaves the original and no temp file."""
        video = tmp_path / "a.mp4"
        video.write_bytes(b"original")

        def failing_ffmpeg(command, **kwargs):
            with open(command[-1], "wb") as f:
                f.write(b"partial")
            raise subprocess.CalledProcessError(1, command, stderr="muxer error")

        with patch(RUN, side_effect=failing_ffmpeg):
            with pytest.raises(MetadataWriteError):
                write_container_tags(video, {"location": "x"})

        assert video.read_bytes() == b"original"
        assert not (tmp_path / "a.tagging.mp4").exists()

    def test_ffmpeg_missing(self, tmp_path):
        video = tmp_path / "a.mp4"
        video.write_bytes(b"original")
        with patch(RUN, side_effect=FileNotFoundError("ffmpeg")):
            with pytest.raises(ToolNotFoundError):
                write_container_tags(video, {})


class TestAddGpsToMovie:
    """Tests for add_gps_to_movie."""

    def test_location_tag_added_to_existing(self, tmp_path):
        video = tmp_path / "a.mov"
        with patch("gphotos_export_manager.organizer.metadata.video_metadata.read_container_tags",
                   return_value={"major_brand": "qt"}), \
             patch("gphotos_export_manager.organizer.metadata.video_metadata.write_container_tags") as write:
            add_gps_to_movie(video, GPSData(10.5, 20.5, 5))

        write.assert_called_once_with(video, {
            "major_brand": "qt",
            "location": "+10.50000+20.50000+5.00000/",
        })

    def test_unreadable_container(self, tmp_path):
        with patch("gphotos_export_manager.organizer.metadata.video_metadata.read_container_tags",
                   side_effect=ParseError("bad")):
            with pytest.raises(MetadataWriteError):
                add_gps_to_movie(tmp_path / "a.mp4", GPSData(1, 1, 1))
