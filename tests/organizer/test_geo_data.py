"""Tests for GPS records and their encodings."""

import piexif
import pytest

from gphotos_export_manager.organizer.metadata.geo_data import (
    GPSData,
    build_gps_ifd,
    deg_to_dms_rational,
    dms_rational_to_deg,
    find_rational_values,
    format_location,
    geo_data_is_set,
)


class TestGeoDataIsSet:
    """Tests for geo_data_is_set."""

    def test_all_zero(self):
        assert not geo_data_is_set(GPSData(0, 0, 0))

    def test_below_epsilon(self):
        assert not geo_data_is_set(GPSData(0.0000001, 0, 0))

    def test_latitude_set(self):
        assert geo_data_is_set(GPSData(1.0, 0, 0))

    def test_negative_altitude_set(self):
        """Test that negative components count by absolute value."""
        assert geo_data_is_set(GPSData(0, 0, -3.0))


class TestFindRationalValues:
    """Tests for the best rational approximation."""

    def test_round_trip_within_tolerance(self):
        """Test that 48.137154 is reconstructed within 1e-6."""
        numerator, denominator = find_rational_values(48.137154, 1_000_000)
        assert abs(numerator / denominator - 48.137154) < 1e-6

    def test_integer_value(self):
        """Test that whole numbers use denominator 1."""
        assert find_rational_values(5.0, 1000) == (5, 1)

    def test_simple_fraction(self):
        """Test that an exact fraction is found with its smallest denominator."""
        assert find_rational_values(2.5, 1000) == (5, 2)

    def test_bounded_denominator(self):
        """Test that the denominator never exceeds the bound."""
        _, denominator = find_rational_values(3.14159265, 100)
        assert denominator <= 100

    def test_zero(self):
        assert find_rational_values(0.0, 1000) == (0, 1)

    def test_invalid_bound(self):
        with pytest.raises(ValueError):
            find_rational_values(1.5, 0)


class TestDegToDmsRational:
    """Tests for the DMS coordinate encoder."""

    def test_encodes_hundredths_of_seconds(self):
        """Test the degree/minute/second split."""
        assert deg_to_dms_rational(10.5) == ((10, 1), (30, 1), (0, 100))

    def test_round_trip_precision(self):
        """Test that decoding is within a hundredth of a second."""
        dms = deg_to_dms_rational(48.137154)
        assert abs(dms_rational_to_deg(dms) - 48.137154) < 0.01 / 3600

    def test_seconds_carry(self):
        """Test that rounding up to 60 seconds carries into minutes."""
        (degrees, _), (minutes, _), (seconds, _) = deg_to_dms_rational(10.9999999)
        assert (degrees, minutes, seconds) == (11, 0, 0)


class TestBuildGpsIfd:
    """Tests for the GPS IFD builder."""

    def test_north_east_above_sea(self):
        ifd = build_gps_ifd(GPSData(10.5, 20.5, 5))

        assert ifd[piexif.GPSIFD.GPSLatitudeRef] == 'N'
        assert ifd[piexif.GPSIFD.GPSLongitudeRef] == 'E'
        assert ifd[piexif.GPSIFD.GPSAltitudeRef] == 0
        assert ifd[piexif.GPSIFD.GPSAltitude] == (5, 1)

    def test_south_west_below_sea(self):
        """Test negative coordinates use absolute values and S/W refs."""
        ifd = build_gps_ifd(GPSData(-33.5, -70.25, -2.5))

        assert ifd[piexif.GPSIFD.GPSLatitudeRef] == 'S'
        assert ifd[piexif.GPSIFD.GPSLongitudeRef] == 'W'
        assert ifd[piexif.GPSIFD.GPSAltitudeRef] == 1
        assert ifd[piexif.GPSIFD.GPSLatitude] == ((33, 1), (30, 1), (0, 100))
        assert ifd[piexif.GPSIFD.GPSAltitude] == (5, 2)


class TestFormatLocation:
    """Tests for the container location string."""

    def test_signs_always_written(self):
        assert format_location(GPSData(10.5, -20.25, 5)) == "+10.50000-20.25000+5.00000/"
