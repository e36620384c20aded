"""Metadata collaborators: sidecar parsing, EXIF, container and ExifTool writers."""

from .geo_data import GPSData, geo_data_is_set, find_rational_values, deg_to_dms_rational, format_location
from .sidecar import SidecarMetadata, parse_sidecar
from .exif_writer import add_gps_to_image, add_dates_to_image, write_gps_file, write_dates_file
from .video_metadata import read_container_tags, write_container_tags, add_gps_to_movie
from .exif_debug import describe_exif

__all__ = [
    'GPSData',
    'geo_data_is_set',
    'find_rational_values',
    'deg_to_dms_rational',
    'format_location',
    'SidecarMetadata',
    'parse_sidecar',
    'add_gps_to_image',
    'add_dates_to_image',
    'write_gps_file',
    'write_dates_file',
    'read_container_tags',
    'write_container_tags',
    'add_gps_to_movie',
    'describe_exif',
]
