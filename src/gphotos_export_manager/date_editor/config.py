"""Configuration model for the date editor."""

from typing import List
from pydantic import BaseModel, Field, ConfigDict, field_validator

from gphotos_export_manager.common import expand_path_variables, normalize_extension


class DateEditorConfig(BaseModel):
    """Edit-list locations and per-extension date repair dispatch."""

    model_config = ConfigDict(extra='forbid')

    to_edit_path: str = Field(
        default="toEdit.json",
        description="Input mapping of date bucket -> file names"
    )
    edit_list_path: str = Field(
        default="edit.json",
        description="Edit list written by 'prepare' and read by 'apply'"
    )
    base_dir: str = Field(
        default=".",
        description="Directory holding the <date-bucket>/<file> tree to repair"
    )
    max_concurrent_tools: int = Field(
        default=4,
        ge=1,
        description="Maximum number of exiftool processes running at once"
    )
    exif_date_extensions: List[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg"],
        description="Extensions whose dates are written directly as EXIF tags"
    )
    tool_date_extensions: List[str] = Field(
        default_factory=lambda: [".png", ".mp4", ".mov"],
        description="Extensions whose dates are written with exiftool"
    )
    ignored_date_extensions: List[str] = Field(
        default_factory=lambda: [".gif"],
        description="Extensions that are left untouched"
    )

    @field_validator('to_edit_path', 'edit_list_path', 'base_dir', mode='before')
    @classmethod
    def expand_paths(cls, v: str) -> str:
        """Expand ${USER_HOME}-style variables."""
        return expand_path_variables(v)

    @field_validator('exif_date_extensions', 'tool_date_extensions', 'ignored_date_extensions', mode='before')
    @classmethod
    def normalize_extensions(cls, v):
        """Lower-case extensions and add the leading dot."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [normalize_extension(ext) for ext in v if isinstance(ext, str)]
        return v
