"""Date editor: edit-list preparation and capture date repair."""

from .config import DateEditorConfig
from .edit_list import EditRecord, build_edit_records
from .timestamp_repair import DateRepairReport, repair_dates

__all__ = [
    'DateEditorConfig',
    'EditRecord',
    'build_edit_records',
    'DateRepairReport',
    'repair_dates',
]
