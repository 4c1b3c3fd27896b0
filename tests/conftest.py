"""Pytest configuration helpers.

Ensure the project root is on sys.path so tests can import the `src` package
when pytest is invoked from the repository root or an isolated test runner.
"""

import sys
from pathlib import Path

import pytest
from geopy.location import Location as GeopyLocation


def pytest_configure():
    # Insert the repository root (parent of the tests directory) at the front
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def no_secrets(monkeypatch):
    """
    Fixture that makes every secrets lookup fall back to its default.

    Also clears the geocoding credential environment variable so tests do not
    depend on the developer's shell.
    """

    def fake_get_secret(key_path, default=None):
        return default

    monkeypatch.setattr("src.utils.config.get_secret", fake_get_secret)
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)


@pytest.fixture
def secrets(monkeypatch):
    """Return a dict that backs ``get_secret``; tests fill in dotted keys."""
    values = {}

    def fake_get_secret(key_path, default=None):
        return values.get(key_path, default)

    monkeypatch.setattr("src.utils.config.get_secret", fake_get_secret)
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    return values


def make_geopy_location(address, lat, lng):
    """Build a real geopy Location like a provider would return."""
    return GeopyLocation(address, (lat, lng), {"formatted_address": address})


class FakeGeocoder:
    """Callable standing in for the rate-limited geopy geocode function."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, query):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_geocoder():
    """Factory fixture: ``fake_geocoder(result=..., error=...)``."""
    return FakeGeocoder


@pytest.fixture
def geopy_location():
    return make_geopy_location


@pytest.fixture
def sample_profiles():
    """Three resolved profiles in insertion order; only Chloé lists Travel."""
    from src.utils.profiles import Location, Profile

    return [
        Profile(
            id="p1",
            name="Bob Martin",
            description="Enjoys woodworking and jazz",
            address="12 Oak Street, Springfield",
            interests=["Music", "Woodworking"],
            location=Location(39.78, -89.65),
        ),
        Profile(
            id="p2",
            name="alice Jones",
            description="Marathon runner and baker",
            address="4 Pine Road, Albany",
            interests=["Running", "Baking"],
            location=Location(42.65, -73.75),
        ),
        Profile(
            id="p3",
            name="Chloé Durand",
            description="Photographer who loves hiking",
            address="9 Rue Victor Hugo, Lyon",
            photo="https://example.com/chloe.jpg",
            interests=["Travel", "Photography"],
            location=Location(45.76, 4.84),
        ),
    ]
