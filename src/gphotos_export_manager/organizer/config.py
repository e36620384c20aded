"""Configuration models for the takeout organizer."""

import os
import re
from typing import List
from pydantic import BaseModel, Field, ConfigDict, field_validator

from gphotos_export_manager.common import expand_path_variables, normalize_extension

DEFAULT_EXPORT_SUB_PATH = ["Takeout", "Google Fotos"]


def split_sub_path(value: str) -> List[str]:
    """Split a relative path string on '/' and the OS separator, dropping empty segments."""
    separators = {'/', os.sep}
    pattern = "|".join(re.escape(sep) for sep in separators)
    return [segment for segment in re.split(pattern, value) if segment]


class OrganizerConfig(BaseModel):
    """Reconciliation and materialization configuration."""

    model_config = ConfigDict(extra='forbid')

    input_dir: str = Field(
        default="",
        description="Directory containing one or more unzipped takeout archives"
    )
    output_dir: str = Field(
        default="",
        description="Destination root for the reorganized tree"
    )
    year_album_prefix: str = Field(
        default="Photos from",
        description="Marker identifying auto-generated year albums"
    )
    ignore_albums: List[str] = Field(
        default_factory=list,
        description="Album names whose instances are never chosen"
    )
    export_sub_path: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPORT_SUB_PATH),
        description="Path segments from an archive root down to the albums level"
    )
    edited_suffix: str = Field(
        default="-bearbeitet",
        description="Marker in the filename of an edited variant"
    )
    metadata_file_name: str = Field(
        default="Metadaten.json",
        description="Exact basename of each album's aggregate metadata file (excluded from scanning)"
    )
    strict: bool = Field(
        default=False,
        description="Fail on duplicate sidecars and destination collisions instead of counting them"
    )
    exif_gps_extensions: List[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg", ".png"],
        description="Extensions whose GPS data is embedded as EXIF tags"
    )
    video_gps_extensions: List[str] = Field(
        default_factory=lambda: [".mp4", ".mov"],
        description="Extensions whose GPS data is written as a container location tag"
    )
    altitude_max_denominator: int = Field(
        default=1000,
        ge=1,
        description="Largest denominator tried when approximating the altitude rational"
    )
    progress_log_interval: int = Field(
        default=100,
        ge=1,
        description="Log materialization progress every N assets"
    )

    @field_validator('input_dir', 'output_dir', mode='before')
    @classmethod
    def expand_paths(cls, v: str) -> str:
        """Expand ${USER_HOME}-style variables."""
        return expand_path_variables(v)

    @field_validator('ignore_albums', mode='before')
    @classmethod
    def coerce_album_list(cls, v):
        """Accept a single album name from env/TOML."""
        if isinstance(v, str):
            return [v] if v else []
        return v

    @field_validator('export_sub_path', mode='before')
    @classmethod
    def coerce_sub_path(cls, v):
        """Accept 'Takeout/Google Fotos' as well as a list of segments."""
        if isinstance(v, str):
            return split_sub_path(v)
        if isinstance(v, (list, tuple)):
            segments: List[str] = []
            for item in v:
                segments.extend(split_sub_path(item) if isinstance(item, str) else [item])
            return segments
        return v

    @field_validator('exif_gps_extensions', 'video_gps_extensions', mode='before')
    @classmethod
    def normalize_extensions(cls, v):
        """Lower-case extensions and add the leading dot."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [normalize_extension(ext) for ext in v if isinstance(ext, str)]
        return v
