"""Address resolution through geopy with rate limiting and a client-side timeout."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import GoogleV3, Nominatim

from src.utils.config import get_api_config
from src.utils.errors import AddressNotFound, ServiceUnavailable
from src.utils.profiles import Location
from src.utils.validation import validate_coordinates

logger = logging.getLogger(__name__)

GeocodeFn = Callable[[str], Any]

# Cached factory
_DEFAULT_GEOCODER: Optional[GeocodeFn] = None


@dataclass(frozen=True)
class Resolution:
    canonical_address: str
    location: Location


def build_geocoder(config: Optional[Dict[str, Any]] = None) -> Optional[GeocodeFn]:
    """
    Create a rate-limited geocode callable for the configured provider.

    Google is used when an API key is configured and enabled, Nominatim
    otherwise. The callable returns every candidate for a query (a list of
    geopy ``Location`` objects, or None).

    Args:
        config: Geocoding configuration; defaults to ``get_api_config("geocoding")``

    Returns:
        The geocode callable, or None when geocoding is disabled
    """
    config = config if config is not None else get_api_config("geocoding")
    if not config.get("enabled", True):
        logger.info("Geocoding disabled by configuration")
        return None

    timeout = config.get("request_timeout", 10)
    if config.get("google_maps_enabled") and config.get("google_maps_api_key"):
        geolocator = GoogleV3(api_key=config["google_maps_api_key"], timeout=timeout)
        provider = "GoogleV3"
    else:
        geolocator = Nominatim(user_agent=config.get("nominatim_user_agent", "profile_map_app"), timeout=timeout)
        provider = "Nominatim"

    rate_limited = RateLimiter(
        geolocator.geocode,
        min_delay_seconds=config.get("rate_limit_delay", 1.0),
        max_retries=config.get("max_retries", 2),
        swallow_exceptions=False,
    )

    def geocode_fn(query: str):
        return rate_limited(query, exactly_one=False)

    logger.info(f"Geocoder ready: {provider}")
    return geocode_fn


def get_default_geocoder() -> Optional[GeocodeFn]:
    global _DEFAULT_GEOCODER
    if _DEFAULT_GEOCODER is None:
        _DEFAULT_GEOCODER = build_geocoder()
    return _DEFAULT_GEOCODER


def _candidates(result: Any) -> List[Any]:
    if result is None:
        return []
    if isinstance(result, (list, tuple)):
        return list(result)
    return [result]


class GeocodingResolver:
    """
    Turns free-text addresses into a canonical address and coordinates.

    One lookup is issued per ``resolve`` call. The blocking geopy call runs in
    a worker thread so the caller's event loop is not blocked, and the wait is
    bounded by ``timeout`` seconds.

    Usage:
        resolver = GeocodingResolver(build_geocoder(), timeout=10)
        resolution = asyncio.run(resolver.resolve("1 Main St"))
    """

    def __init__(self, geocode: Optional[GeocodeFn], timeout: float = 10.0):
        self._geocode = geocode
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "GeocodingResolver":
        if config is None:
            config = get_api_config("geocoding")
            geocode = get_default_geocoder()
        else:
            geocode = build_geocoder(config)
        return cls(geocode, timeout=config.get("request_timeout", 10.0))

    @property
    def available(self) -> bool:
        return self._geocode is not None

    async def resolve(self, address: str) -> Resolution:
        """
        Resolve ``address`` using the first candidate the provider returns.

        Raises:
            ServiceUnavailable: No provider is configured; no request is made
            AddressNotFound: No candidates, a provider error, a timeout or
                unusable coordinates
        """
        if self._geocode is None:
            raise ServiceUnavailable()

        query = (address or "").strip()
        try:
            result = await asyncio.wait_for(asyncio.to_thread(self._geocode, query), timeout=self.timeout)
        except (asyncio.TimeoutError, GeocoderTimedOut) as e:
            logger.warning(f"Geocoding timed out after {self.timeout}s for '{query}'")
            raise AddressNotFound("The address lookup timed out. Please try again.") from e
        except GeocoderServiceError as e:
            logger.warning(f"Geocoding failed for '{query}': {type(e).__name__}: {e}")
            raise AddressNotFound() from e

        candidates = _candidates(result)
        if not candidates:
            logger.warning(f"No geocoding results for '{query}'")
            raise AddressNotFound()

        first = candidates[0]
        try:
            lat, lng = float(first.latitude), float(first.longitude)
        except (AttributeError, TypeError, ValueError) as e:
            raise AddressNotFound() from e
        valid, msg = validate_coordinates(lat, lng)
        if not valid:
            logger.warning(f"Geocoder returned unusable coordinates for '{query}': {msg}")
            raise AddressNotFound()

        canonical = getattr(first, "address", None) or query
        logger.info(f"Resolved '{query}' -> '{canonical}' ({lat:.5f}, {lng:.5f})")
        return Resolution(canonical_address=canonical, location=Location(lat=lat, lng=lng))

