"""GPS records from sidecars and their EXIF / container encodings."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import piexif

# Below this every component counts as zero; Google writes 0.0 for "no location"
GEO_EPSILON = 0.000001

# Seconds of a DMS coordinate are stored in hundredths
DMS_SECONDS_DENOMINATOR = 100

Rational = Tuple[int, int]


@dataclass(frozen=True)
class GPSData:
    """Location of an asset as found in the sidecar's geoData."""
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0


def geo_data_is_set(gps: GPSData) -> bool:
    """True unless every component is effectively zero."""
    return (
        abs(gps.altitude) > GEO_EPSILON
        or abs(gps.latitude) > GEO_EPSILON
        or abs(gps.longitude) > GEO_EPSILON
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def find_rational_values(decimal_value: float, max_denominator: int) -> Rational:
    """Best rational approximation with a denominator up to max_denominator.

    Tries every denominator and keeps the smallest one reaching the lowest
    absolute error.

    Raises:
        ValueError: If max_denominator is not positive
    """
    if max_denominator <= 0:
        raise ValueError("Maximum denominator must be greater than 0.")

    denominator = 1
    best_numerator = 0
    best_error = abs(decimal_value)

    for i in range(1, max_denominator + 1):
        rounded_numerator = _round_half_up(decimal_value * i)
        error = abs(decimal_value - rounded_numerator / i)

        if error < best_error:
            best_numerator = rounded_numerator
            denominator = i
            best_error = error
            if error == 0:
                break

    return best_numerator, denominator


def deg_to_dms_rational(degrees_float: float) -> Tuple[Rational, Rational, Rational]:
    """Encode non-negative decimal degrees as EXIF degree/minute/second rationals."""
    minutes_float = degrees_float % 1 * 60
    seconds_float = minutes_float % 1 * 60

    degrees = int(math.floor(degrees_float))
    minutes = int(math.floor(minutes_float))
    seconds = _round_half_up(seconds_float * DMS_SECONDS_DENOMINATOR)

    if seconds >= 60 * DMS_SECONDS_DENOMINATOR:
        seconds -= 60 * DMS_SECONDS_DENOMINATOR
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1

    return (degrees, 1), (minutes, 1), (seconds, DMS_SECONDS_DENOMINATOR)


def dms_rational_to_deg(dms: Tuple[Rational, Rational, Rational]) -> float:
    """Decode EXIF degree/minute/second rationals to decimal degrees."""
    (d_num, d_den), (m_num, m_den), (s_num, s_den) = dms
    return d_num / d_den + (m_num / m_den) / 60.0 + (s_num / s_den) / 3600.0


def build_gps_ifd(gps: GPSData, altitude_max_denominator: int = 1000) -> Dict[int, Any]:
    """GPS IFD tags for piexif (tags documented at https://exiv2.org/tags.html)."""
    return {
        piexif.GPSIFD.GPSLatitude: deg_to_dms_rational(abs(gps.latitude)),
        piexif.GPSIFD.GPSLongitude: deg_to_dms_rational(abs(gps.longitude)),
        piexif.GPSIFD.GPSAltitude: find_rational_values(abs(gps.altitude), altitude_max_denominator),
        piexif.GPSIFD.GPSLatitudeRef: 'N' if gps.latitude > 0 else 'S',
        piexif.GPSIFD.GPSLongitudeRef: 'E' if gps.longitude > 0 else 'W',
        # 0 = above sea level, 1 = below sea level
        piexif.GPSIFD.GPSAltitudeRef: 0 if gps.altitude > 0 else 1,
    }


def format_location(gps: GPSData) -> str:
    """ISO 6709 location string as stored in QuickTime/MP4 containers."""
    return f"{gps.latitude:+.5f}{gps.longitude:+.5f}{gps.altitude:+.5f}/"
