"""Embed GPS and date tags into still images.

JPEG EXIF blocks are spliced in with piexif without touching the image
data. piexif cannot insert into PNG, so a PNG gets its eXIf chunk replaced
in the original chunk stream; image data, text chunks and APNG frames are
copied byte for byte.
"""

import io
import logging
import struct
import zlib
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Tuple

import piexif
from PIL import Image

from ..errors import MetadataWriteError
from .geo_data import GPSData, build_gps_ifd

logger = logging.getLogger(__name__)

JPEG_MAGIC = b"\xff\xd8"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# piexif.dump prefixes the TIFF block with the JPEG APP1 identifier
EXIF_IDENTIFIER = b"Exif\x00\x00"

ExifDict = Dict[str, Any]


def empty_exif_dict() -> ExifDict:
    return {"0th": {}, "Exif": {}, "GPS": {}, "Interop": {}, "1st": {}, "thumbnail": None}


def detect_image_format(image_bytes: bytes) -> str:
    """Return 'jpeg' or 'png' from the magic bytes.

    Raises:
        MetadataWriteError: For any other content
    """
    if image_bytes.startswith(JPEG_MAGIC):
        return "jpeg"
    if image_bytes.startswith(PNG_MAGIC):
        return "png"
    raise MetadataWriteError("Unsupported image data for EXIF writing", header=image_bytes[:8].hex())


def load_exif_dict(image_bytes: bytes) -> ExifDict:
    """Load the EXIF tag tree of a JPEG or PNG image."""
    image_format = detect_image_format(image_bytes)

    if image_format == "jpeg":
        return piexif.load(image_bytes)

    with Image.open(io.BytesIO(image_bytes)) as img:
        raw_exif = img.info.get("exif")
    if not raw_exif:
        return empty_exif_dict()
    return piexif.load(raw_exif)


def _fix_scene_type(exif_dict: ExifDict) -> None:
    """SceneType is UNDEFINED; piexif.load may hand it back as an int that dump rejects."""
    exif_ifd = exif_dict.get("Exif")
    if not exif_ifd:
        return
    scene_type = exif_ifd.get(piexif.ExifIFD.SceneType)
    if isinstance(scene_type, int):
        exif_ifd[piexif.ExifIFD.SceneType] = bytes([scene_type])


def iter_png_chunks(png_bytes: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """Yield (type, raw chunk bytes) for every chunk after the signature.

    Raises:
        MetadataWriteError: If a chunk runs past the end of the data
    """
    pos = len(PNG_MAGIC)
    while pos < len(png_bytes):
        if pos + 8 > len(png_bytes):
            raise MetadataWriteError("Truncated PNG chunk header", offset=pos)
        length, chunk_type = struct.unpack(">I4s", png_bytes[pos:pos + 8])
        end = pos + 12 + length
        if end > len(png_bytes):
            raise MetadataWriteError("Truncated PNG chunk", chunk=chunk_type.decode('latin-1'), offset=pos)
        yield chunk_type, png_bytes[pos:end]
        pos = end


def make_png_chunk(chunk_type: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


def insert_png_exif(exif_bytes: bytes, png_bytes: bytes) -> bytes:
    """Replace the eXIf chunk of a PNG, placing it before the first IDAT."""
    if exif_bytes.startswith(EXIF_IDENTIFIER):
        exif_bytes = exif_bytes[len(EXIF_IDENTIFIER):]
    exif_chunk = make_png_chunk(b"eXIf", exif_bytes)

    parts = [PNG_MAGIC]
    inserted = False
    for chunk_type, raw in iter_png_chunks(png_bytes):
        if chunk_type == b"eXIf":
            continue
        if chunk_type == b"IDAT" and not inserted:
            parts.append(exif_chunk)
            inserted = True
        parts.append(raw)

    if not inserted:
        raise MetadataWriteError("PNG has no IDAT chunk")
    return b"".join(parts)


def _embed_exif(image_bytes: bytes, exif_dict: ExifDict) -> bytes:
    _fix_scene_type(exif_dict)
    exif_bytes = piexif.dump(exif_dict)

    if detect_image_format(image_bytes) == "png":
        return insert_png_exif(exif_bytes, image_bytes)

    output = io.BytesIO()
    piexif.insert(exif_bytes, image_bytes, output)
    return output.getvalue()


def rewrite_exif(image_bytes: bytes, mutate: Callable[[ExifDict], None]) -> bytes:
    """Load EXIF, apply mutate and re-embed it.

    Raises:
        MetadataWriteError: If the image or its EXIF block cannot be processed
    """
    try:
        exif_dict = load_exif_dict(image_bytes)
        mutate(exif_dict)
        return _embed_exif(image_bytes, exif_dict)
    except MetadataWriteError:
        raise
    except Exception as e:
        raise MetadataWriteError(f"EXIF rewrite failed: {e}", error_type=type(e).__name__) from e


def add_gps_to_image(image_bytes: bytes, gps: GPSData, altitude_max_denominator: int = 1000) -> bytes:
    """Return image bytes whose GPS IFD is replaced by the given location."""
    def set_gps(exif_dict: ExifDict) -> None:
        exif_dict["GPS"] = build_gps_ifd(gps, altitude_max_denominator)

    return rewrite_exif(image_bytes, set_gps)


def add_dates_to_image(image_bytes: bytes, original: str, digitized: str) -> bytes:
    """Return image bytes with DateTimeOriginal and DateTimeDigitized set."""
    def set_dates(exif_dict: ExifDict) -> None:
        exif_ifd = exif_dict.setdefault("Exif", {})
        exif_ifd[piexif.ExifIFD.DateTimeOriginal] = original
        exif_ifd[piexif.ExifIFD.DateTimeDigitized] = digitized

    return rewrite_exif(image_bytes, set_dates)


def write_gps_file(source: Path, destination: Path, gps: GPSData, altitude_max_denominator: int = 1000) -> None:
    """Write source with embedded GPS tags to destination.

    The destination is only written once the new bytes are complete, so a
    failure leaves whatever was there before.
    """
    new_bytes = add_gps_to_image(source.read_bytes(), gps, altitude_max_denominator)
    destination.write_bytes(new_bytes)
    logger.debug(f"Embedded GPS tags: {{'path': {str(destination)!r}}}")


def write_dates_file(path: Path, original: str, digitized: str) -> None:
    """Set the EXIF capture dates of an image in place."""
    new_bytes = add_dates_to_image(path.read_bytes(), original, digitized)
    path.write_bytes(new_bytes)
    logger.debug(f"Embedded EXIF dates: {{'path': {str(path)!r}, 'original': {original!r}}}")
