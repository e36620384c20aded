"""Date editor pass 1: turn toEdit.json into the edit list.

toEdit.json maps a date bucket (the folder a file was sorted into) to the
names of the files in it. Each name is reduced to its asset key with the
organizer's rule, the key's sidecar is looked up in the asset map and the
two timestamps are copied into edit.json for pass 2.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from gphotos_export_manager.organizer.asset_keys import AssetKeyNormalizer
from gphotos_export_manager.organizer.metadata.sidecar import parse_sidecar
from gphotos_export_manager.organizer.reconciler import AssetEntry
from .errors import ConfigurationError, MissingSidecarError, ParseError

logger = logging.getLogger(__name__)


@dataclass
class EditRecord:
    """One line of edit.json."""
    file: str
    date: str
    photo_taken_time: Optional[int] = None
    creation_time: Optional[int] = None

    def to_json(self) -> Dict[str, object]:
        return {
            'file': self.file,
            'date': self.date,
            'photoTakenTime': self.photo_taken_time,
            'creationTime': self.creation_time,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, object]) -> "EditRecord":
        return cls(
            file=str(data['file']),
            date=str(data['date']),
            photo_taken_time=_optional_int(data.get('photoTakenTime')),
            creation_time=_optional_int(data.get('creationTime')),
        )


@dataclass
class EditListReport:
    """Outcome of building the edit list."""
    files: int = 0
    records: int = 0
    missing_sidecar: int = 0
    sidecar_errors: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def _optional_int(value: object) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _read_json(path: Path) -> object:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"File does not exist: {path}", path=str(path)) from e
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {path}: {e}", path=str(path)) from e


def load_to_edit(path: Path) -> Dict[str, List[str]]:
    """Load the date bucket -> file names mapping.

    Raises:
        ConfigurationError: If the file does not exist
        ParseError: If it is not a JSON object of string lists
    """
    data = _read_json(path)
    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        raise ParseError(f"Expected an object of file name lists in {path}", path=str(path))
    return {str(date): [str(name) for name in names] for date, names in data.items()}


def flatten(to_edit: Mapping[str, List[str]]) -> List[Tuple[str, str]]:
    """(date, file) pairs in bucket order, then file order."""
    return [(date, file_name) for date, names in to_edit.items() for file_name in names]


def build_edit_records(
    to_edit: Mapping[str, List[str]],
    assets: Mapping[str, AssetEntry],
    edited_suffix: str,
    strict: bool = False,
) -> Tuple[List[EditRecord], EditListReport]:
    """Look up the sidecar timestamps of every listed file.

    The key normalizer is built from the extensions of the listed files, not
    from the album scan, so a file type that only occurs in the albums is not
    stripped here.

    Raises:
        MissingSidecarError: In strict mode, for a file whose key has no sidecar
    """
    pairs = flatten(to_edit)
    normalizer = AssetKeyNormalizer.from_file_names((name for _, name in pairs), edited_suffix)

    records: List[EditRecord] = []
    report = EditListReport(files=len(pairs))

    for date, file_name in pairs:
        key = normalizer.normalize(file_name)
        entry = assets.get(key)
        meta_path = entry.meta_path if entry is not None else None

        if meta_path is None:
            report.missing_sidecar += 1
            if strict:
                raise MissingSidecarError(
                    f"No sidecar for {date}/{file_name} (key {key!r})",
                    file=file_name,
                    date=date,
                    key=key,
                )
            logger.error(f"No sidecar, skipping: {{'file': {file_name!r}, 'date': {date!r}, 'key': {key!r}}}")
            continue

        try:
            metadata = parse_sidecar(meta_path)
        except ParseError as e:
            report.sidecar_errors += 1
            logger.error(f"Unreadable sidecar, skipping: {{'file': {file_name!r}, 'meta': {str(meta_path)!r}, 'error': {str(e)!r}}}")
            continue

        records.append(EditRecord(
            file=file_name,
            date=date,
            photo_taken_time=metadata.photo_taken_time,
            creation_time=metadata.creation_time,
        ))

    report.records = len(records)
    logger.info(f"Edit list built: {report.as_dict()}")
    return records, report


def write_edit_list(records: List[EditRecord], path: Path) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump([record.to_json() for record in records], f, indent=2, ensure_ascii=False)
    logger.info(f"Wrote edit list: {{'path': {str(path)!r}, 'records': {len(records)}}}")


def read_edit_list(path: Path) -> List[EditRecord]:
    """Load edit.json.

    Raises:
        ConfigurationError: If the file does not exist
        ParseError: If it is not a list of records
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise ParseError(f"Expected a list of records in {path}", path=str(path))
    try:
        return [EditRecord.from_json(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Invalid record in {path}: {e}", path=str(path)) from e
