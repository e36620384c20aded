"""Date editor pass 2: write capture dates into the sorted files.

Files live at <base_dir>/<date>/<file>. JPEGs get DateTimeOriginal and
DateTimeDigitized through the EXIF codec; PNGs and videos go through
exiftool, run concurrently and awaited before the report is returned.
Without exiftool on PATH those files are skipped after one warning.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from gphotos_export_manager.common import ToolNotFoundError
from gphotos_export_manager.organizer.errors import MetadataWriteError
from gphotos_export_manager.organizer.metadata import exiftool
from gphotos_export_manager.organizer.metadata.exif_writer import EXIF_DATETIME_FORMAT, write_dates_file
from gphotos_export_manager.organizer.tool_checker import exiftool_available
from .config import DateEditorConfig
from .edit_list import EditRecord
from .errors import DateRepairError

logger = logging.getLogger(__name__)


@dataclass
class DateRepairFailure:
    path: str
    error: str


@dataclass
class DateRepairReport:
    """Outcome of one repair batch; every failure is listed."""
    total: int = 0
    exif_written: int = 0
    tool_written: int = 0
    skipped: int = 0
    failures: List[DateRepairFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def add_failure(self, path: Path, error: Exception) -> None:
        self.failures.append(DateRepairFailure(path=str(path), error=str(error)))
        logger.error(f"Date repair failed: {{'path': {str(path)!r}, 'error': {str(error)!r}}}")

    def as_dict(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'exif_written': self.exif_written,
            'tool_written': self.tool_written,
            'skipped': self.skipped,
            'failed': self.failed,
        }


def format_exif_datetime(timestamp: int) -> str:
    """Unix seconds as 'YYYY:MM:DD HH:MM:SS' in local time."""
    return datetime.fromtimestamp(timestamp).strftime(EXIF_DATETIME_FORMAT)


def repair_exif_dates(path: Path, record: EditRecord) -> None:
    """Set both EXIF capture dates of a JPEG from photoTakenTime.

    Raises:
        DateRepairError: If the record has no photoTakenTime
        MetadataWriteError: If the image cannot be rewritten
    """
    if record.photo_taken_time is None:
        raise DateRepairError(f"No photoTakenTime for {record.file}", file=record.file)
    taken = format_exif_datetime(record.photo_taken_time)
    write_dates_file(path, original=taken, digitized=taken)


async def repair_tool_dates(path: Path, record: EditRecord) -> None:
    """Set AllDates with exiftool from photoTakenTime, else creationTime.

    Raises:
        DateRepairError: If the record has neither timestamp
        MetadataWriteError, ToolNotFoundError: If exiftool fails
    """
    timestamp: Optional[int] = record.photo_taken_time
    if timestamp is None:
        timestamp = record.creation_time
    if timestamp is None:
        raise DateRepairError(f"No timestamp for {record.file}", file=record.file)
    await exiftool.write_tags(path, {'AllDates': format_exif_datetime(timestamp)})


async def repair_dates(records: Sequence[EditRecord], config: DateEditorConfig) -> DateRepairReport:
    """Repair the dates of every record; per-file errors never stop the batch."""
    base_dir = Path(config.base_dir)
    report = DateRepairReport(total=len(records))
    semaphore = asyncio.Semaphore(config.max_concurrent_tools)

    async def run_tool(path: Path, record: EditRecord) -> None:
        async with semaphore:
            try:
                await repair_tool_dates(path, record)
            except (DateRepairError, MetadataWriteError, ToolNotFoundError) as e:
                report.add_failure(path, e)
                return
        report.tool_written += 1

    tool_records = []
    for record in records:
        path = base_dir / record.date / record.file
        extension = path.suffix.lower()
        logger.info(f"Processing {record.date}/{record.file}...")

        if extension in config.exif_date_extensions:
            try:
                repair_exif_dates(path, record)
            except (DateRepairError, MetadataWriteError, OSError) as e:
                report.add_failure(path, e)
                continue
            report.exif_written += 1
        elif extension in config.tool_date_extensions:
            tool_records.append((path, record))
        else:
            if extension not in config.ignored_date_extensions:
                logger.warning(f"No date writer for extension: {{'path': {str(path)!r}, 'extension': {extension!r}}}")
            report.skipped += 1

    # Checked once per batch
    if tool_records and not exiftool_available():
        report.skipped += len(tool_records)
        tool_records = []

    await asyncio.gather(*(run_tool(path, record) for path, record in tool_records))

    logger.info(f"Date repair complete: {report.as_dict()}")
    return report
