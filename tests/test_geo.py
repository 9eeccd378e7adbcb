"""Tests for GPS decoding and reverse geocoding."""

from types import SimpleNamespace

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from PIL.TiffImagePlugin import IFDRational

from conftest import container_from_tags
from fotobot.exif import tags
from fotobot.exif.geo import ReverseGeocoder, decode_gps, extract_country, resolve_place

AREA_INFORMATION = b"ASCII\x00\x00\x00Schenley Park"


class _FakeGeolocator:
    def __init__(self, address=None, error=None):
        self.address = address
        self.error = error
        self.calls = []

    def reverse(self, query, **kwargs):
        self.calls.append((query, kwargs))
        if self.error is not None:
            raise self.error
        if self.address is None:
            return None
        return SimpleNamespace(address=self.address)


class TestDecodeGps:
    def test_signed_coordinates_and_display(self, pittsburgh_gps):
        coordinate = decode_gps(container_from_tags(pittsburgh_gps))

        assert coordinate.latitude == pytest.approx(40.446056, abs=1e-6)
        assert coordinate.longitude == pytest.approx(-79.948611, abs=1e-6)
        assert coordinate.display == "40.446056° N, 79.948611° W"

    def test_southern_hemisphere_flips_sign(self, pittsburgh_gps):
        entries = dict(pittsburgh_gps)
        entries[tags.GPS_LATITUDE_REF] = "S"
        entries[tags.GPS_LONGITUDE_REF] = "E"

        coordinate = decode_gps(container_from_tags(entries))

        assert coordinate.latitude < 0
        assert coordinate.longitude > 0
        assert coordinate.display == "40.446056° S, 79.948611° E"

    @pytest.mark.parametrize("reference", [None, "", "X", "W"])
    def test_unrecognized_latitude_reference_defaults_to_north(self, pittsburgh_gps, reference):
        entries = dict(pittsburgh_gps)
        if reference is None:
            del entries[tags.GPS_LATITUDE_REF]
        else:
            entries[tags.GPS_LATITUDE_REF] = reference

        coordinate = decode_gps(container_from_tags(entries))

        assert coordinate.latitude > 0
        assert coordinate.display.startswith("40.446056° N")

    def test_missing_longitude_yields_nothing(self, pittsburgh_gps):
        entries = dict(pittsburgh_gps)
        del entries[tags.GPS_LONGITUDE]

        assert decode_gps(container_from_tags(entries)) is None

    def test_non_finite_component_yields_nothing(self, pittsburgh_gps):
        entries = dict(pittsburgh_gps)
        entries[tags.GPS_LATITUDE] = (IFDRational(40, 1), IFDRational(1, 0), IFDRational(0, 1))

        assert decode_gps(container_from_tags(entries)) is None


class TestReverseGeocoder:
    def test_lookup_passes_rounded_point_and_language(self):
        geolocator = _FakeGeolocator(address="Schenley Park, Pittsburgh, Pennsylvania, United States")
        geocoder = ReverseGeocoder(geolocator=geolocator, timeout=5)

        name = geocoder.lookup(40.44605555, -79.94861111, "zh-hans")

        assert name == "Schenley Park, Pittsburgh, Pennsylvania, United States"
        point, kwargs = geolocator.calls[0]
        assert point.latitude == pytest.approx(40.446056)
        assert point.longitude == pytest.approx(-79.948611)
        assert kwargs["language"] == "zh-hans"
        assert kwargs["addressdetails"] is False
        assert kwargs["timeout"] == 5

    @pytest.mark.parametrize("error", [
        GeocoderTimedOut("timed out"),
        GeocoderServiceError("HTTP Error 503"),
        ValueError("malformed response"),
    ])
    def test_failures_return_none(self, error):
        geocoder = ReverseGeocoder(geolocator=_FakeGeolocator(error=error))

        assert geocoder.lookup(40.0, -79.0) is None

    @pytest.mark.parametrize("address", [None, "", "   "])
    def test_missing_display_name_returns_none(self, address):
        geocoder = ReverseGeocoder(geolocator=_FakeGeolocator(address=address))

        assert geocoder.lookup(40.0, -79.0) is None


class TestResolvePlace:
    def test_geocoded_name_and_country(self, pittsburgh_gps):
        container = container_from_tags(pittsburgh_gps)
        geocoder = ReverseGeocoder(geolocator=_FakeGeolocator(address="Schenley Park, Pittsburgh, United States"))

        location, country = resolve_place(container, decode_gps(container), geocoder, "en")

        assert location == "Schenley Park, Pittsburgh, United States"
        assert country == "United States"

    def test_unreachable_service_falls_back_to_area_information(self, pittsburgh_gps):
        entries = dict(pittsburgh_gps)
        entries[tags.GPS_AREA_INFORMATION] = AREA_INFORMATION
        container = container_from_tags(entries)
        geocoder = ReverseGeocoder(geolocator=_FakeGeolocator(error=GeocoderTimedOut("timed out")))

        assert resolve_place(container, decode_gps(container), geocoder) == ("Schenley Park", None)

    def test_no_fallback_source_leaves_place_empty(self, pittsburgh_gps):
        container = container_from_tags(pittsburgh_gps)
        geocoder = ReverseGeocoder(geolocator=_FakeGeolocator(error=GeocoderTimedOut("timed out")))

        assert resolve_place(container, decode_gps(container), geocoder) == (None, None)

    def test_area_information_without_gps(self):
        container = container_from_tags({tags.GPS_AREA_INFORMATION: AREA_INFORMATION})

        assert resolve_place(container, None, None) == ("Schenley Park", None)


def test_extract_country():
    assert extract_country("Pittsburgh, Pennsylvania, United States") == "United States"
    assert extract_country("Somewhere, ") == "Somewhere"
    assert extract_country(" , ") is None
