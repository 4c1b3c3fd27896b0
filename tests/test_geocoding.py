"""Test suite for the geocoding resolver.

The geopy provider is never contacted: resolvers are built around fake
geocode callables, and provider classes are monkeypatched where the factory
is under test.
"""
import asyncio
import time
from types import SimpleNamespace

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable

from src.utils import geocoding
from src.utils.errors import AddressNotFound, ServiceUnavailable
from src.utils.geocoding import GeocodingResolver, Resolution, build_geocoder
from src.utils.profiles import Location


def _resolve(resolver, address):
    return asyncio.run(resolver.resolve(address))


class TestResolve:
    def test_service_unavailable_makes_no_call(self, fake_geocoder):
        unused = fake_geocoder(result=[])
        resolver = GeocodingResolver(None)

        with pytest.raises(ServiceUnavailable):
            _resolve(resolver, "1 Main St")
        assert resolver.available is False
        assert unused.calls == []

    def test_first_candidate_wins(self, fake_geocoder, geopy_location):
        geocode = fake_geocoder(
            result=[geopy_location("1 Main St, City", 1.0, 2.0), geopy_location("1 Main St, Elsewhere", 5.0, 6.0)]
        )
        resolution = _resolve(GeocodingResolver(geocode), "  1 Main St ")

        assert resolution == Resolution(canonical_address="1 Main St, City", location=Location(lat=1.0, lng=2.0))
        assert geocode.calls == ["1 Main St"]

    def test_single_location_result(self, fake_geocoder, geopy_location):
        geocode = fake_geocoder(result=geopy_location("Lyon, France", 45.76, 4.84))
        resolution = _resolve(GeocodingResolver(geocode), "Lyon")
        assert resolution.location == Location(45.76, 4.84)

    @pytest.mark.parametrize("result", [None, []])
    def test_zero_results_is_address_not_found(self, fake_geocoder, result):
        geocode = fake_geocoder(result=result)
        with pytest.raises(AddressNotFound) as exc_info:
            _resolve(GeocodingResolver(geocode), "Nowhere at all")
        assert "Could not find the location" in str(exc_info.value)
        assert len(geocode.calls) == 1

    @pytest.mark.parametrize("error", [GeocoderServiceError("REQUEST_DENIED"), GeocoderUnavailable("down")])
    def test_provider_errors_are_address_not_found(self, fake_geocoder, error):
        with pytest.raises(AddressNotFound):
            _resolve(GeocodingResolver(fake_geocoder(error=error)), "1 Main St")

    def test_provider_timeout(self, fake_geocoder):
        with pytest.raises(AddressNotFound) as exc_info:
            _resolve(GeocodingResolver(fake_geocoder(error=GeocoderTimedOut("slow"))), "1 Main St")
        assert "timed out" in str(exc_info.value)

    def test_client_side_timeout(self):
        def slow_geocode(query):
            time.sleep(0.5)
            return []

        resolver = GeocodingResolver(slow_geocode, timeout=0.05)
        with pytest.raises(AddressNotFound) as exc_info:
            _resolve(resolver, "1 Main St")
        assert "timed out" in str(exc_info.value)

    def test_invalid_coordinates_rejected(self, fake_geocoder):
        bogus = SimpleNamespace(address="Somewhere", latitude=200.0, longitude=0.0)
        with pytest.raises(AddressNotFound):
            _resolve(GeocodingResolver(fake_geocoder(result=[bogus])), "Somewhere")

    def test_unexpected_errors_propagate(self, fake_geocoder):
        with pytest.raises(KeyError):
            _resolve(GeocodingResolver(fake_geocoder(error=KeyError("boom"))), "1 Main St")


class _FakeProvider:
    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.queries = []
        _FakeProvider.instances.append(self)

    def geocode(self, query, **kwargs):
        self.queries.append((query, kwargs))
        return []


class TestBuildGeocoder:
    @pytest.fixture(autouse=True)
    def fake_providers(self, monkeypatch):
        _FakeProvider.instances = []
        google = type("FakeGoogle", (_FakeProvider,), {})
        nominatim = type("FakeNominatim", (_FakeProvider,), {})
        monkeypatch.setattr(geocoding, "GoogleV3", google)
        monkeypatch.setattr(geocoding, "Nominatim", nominatim)
        return google, nominatim

    def _config(self, **overrides):
        config = {
            "enabled": True,
            "google_maps_api_key": "",
            "google_maps_enabled": False,
            "nominatim_user_agent": "test-agent",
            "request_timeout": 3,
            "rate_limit_delay": 0,
            "max_retries": 0,
        }
        config.update(overrides)
        return config

    def test_disabled_returns_none(self):
        assert build_geocoder(self._config(enabled=False)) is None
        assert GeocodingResolver.from_config(self._config(enabled=False)).available is False

    def test_nominatim_by_default(self, fake_providers):
        geocode = build_geocoder(self._config())
        geocode("1 Main St")

        provider = _FakeProvider.instances[0]
        assert type(provider).__name__ == "FakeNominatim"
        assert provider.kwargs == {"user_agent": "test-agent", "timeout": 3}
        assert provider.queries == [("1 Main St", {"exactly_one": False})]

    def test_google_when_key_configured(self):
        build_geocoder(self._config(google_maps_api_key="k", google_maps_enabled=True))
        provider = _FakeProvider.instances[0]
        assert type(provider).__name__ == "FakeGoogle"
        assert provider.kwargs["api_key"] == "k"

    def test_google_key_ignored_when_disabled(self):
        build_geocoder(self._config(google_maps_api_key="k", google_maps_enabled=False))
        assert type(_FakeProvider.instances[0]).__name__ == "FakeNominatim"

    def test_from_config_uses_timeout(self):
        resolver = GeocodingResolver.from_config(self._config(request_timeout=7))
        assert resolver.available is True
        assert resolver.timeout == 7

