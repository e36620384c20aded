"""Human-readable dump of an image's EXIF tags."""

from pathlib import Path
from typing import Dict, List

from PIL.ExifTags import GPSTAGS, TAGS

from ..errors import MetadataWriteError
from .exif_writer import load_exif_dict

# Interop tags share numbers with GPS ones, so they get their own names
INTEROP_TAGS: Dict[int, str] = {
    1: "InteroperabilityIndex",
    2: "InteroperabilityVersion",
    4096: "RelatedImageFileFormat",
    4097: "RelatedImageWidth",
    4098: "RelatedImageLength",
}

IFD_TAG_NAMES = {
    "0th": TAGS,
    "1st": TAGS,
    "Exif": TAGS,
    "GPS": GPSTAGS,
    "Interop": INTEROP_TAGS,
}


def describe_exif(image_path: Path) -> List[str]:
    """List every IFD and its tags, one line per tag; the thumbnail is skipped.

    Raises:
        MetadataWriteError: If the file is not a JPEG/PNG or its EXIF block is unreadable
    """
    try:
        exif_dict = load_exif_dict(image_path.read_bytes())
    except MetadataWriteError:
        raise
    except Exception as e:
        raise MetadataWriteError(f"Cannot read EXIF of {image_path}: {e}", path=str(image_path)) from e

    lines = []
    for ifd, tags in exif_dict.items():
        if ifd == "thumbnail" or not isinstance(tags, dict):
            continue
        lines.append(f"- {ifd}")
        names = IFD_TAG_NAMES.get(ifd, {})
        for tag, value in tags.items():
            if isinstance(value, bytes):
                value = value.decode('utf-8', errors='replace').rstrip('\x00')
            lines.append(f"    - {names.get(tag, tag)}: {value}")
    return lines
