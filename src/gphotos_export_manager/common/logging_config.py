"""The [logging] section of the configuration."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .config_utils import expand_path_variables


class LoggingConfig(BaseModel):
    """Console level and format, plus an optional JSON log file.

    Both commands read the same section; --log-level overrides `level`.
    """

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level"
    )
    format: Literal["simple", "json"] = Field(
        default="simple",
        description="Console format: plain text lines or JSON lines"
    )
    file: Optional[str] = Field(
        default=None,
        description="Optional rotating log file, always JSON lines; ${USER_DATA}-style variables allowed"
    )

    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v, info):
        """Levels are upper case and formats lower case, whatever the input."""
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == 'level' else v.lower()

    @field_validator('file', mode='before')
    @classmethod
    def expand_file(cls, v):
        """Expand path variables; an empty string means no file."""
        if isinstance(v, str):
            return expand_path_variables(v) or None
        return v
