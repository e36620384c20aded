"""Root configuration shared by the gphotos-organize and gphotos-dates commands."""

from pydantic import BaseModel, Field, ConfigDict

from .common import LoggingConfig
from .date_editor.config import DateEditorConfig
from .organizer.config import OrganizerConfig


class Settings(BaseModel):
    """Root configuration model.

    Loaded by ConfigLoader from defaults.toml, system and user config files
    and GPHOTOS_EXPORT_MANAGER_<SECTION>__<KEY> environment variables.
    """

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    organizer: OrganizerConfig = Field(default_factory=OrganizerConfig)
    date_editor: DateEditorConfig = Field(default_factory=DateEditorConfig)
