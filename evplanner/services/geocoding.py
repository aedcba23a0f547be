import hashlib
import logging
from dataclasses import dataclass
from functools import lru_cache

import requests
from django.conf import settings
from django.core.cache import cache

from evplanner.domain.types import Coordinate
from evplanner.services.city_locator import CityLocator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodedPoint:
    latitude: float
    longitude: float
    display_name: str
    source: str

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class GeocodingError(Exception):
    pass


class LocationNotFoundError(GeocodingError):
    pass


@lru_cache(maxsize=4)
def _get_city_locator(country: str) -> CityLocator:
    return CityLocator(country)


def _cache_key(query: str, region_hint: str | None) -> str:
    raw = f"{query.lower().strip()}|{(region_hint or '').lower().strip()}"
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return f"geocode::{digest}"


def _local_lookup(query: str, region_hint: str | None) -> GeocodedPoint | None:
    country = settings.GEOCODER_LOCAL_COUNTRY
    if not country:
        return None

    place = query.split(",")[0].strip()
    local_match = _get_city_locator(country).lookup(place=place, region=region_hint)
    if local_match is None:
        return None

    return GeocodedPoint(
        latitude=local_match.latitude,
        longitude=local_match.longitude,
        display_name=f"{place}, {region_hint}" if region_hint else place,
        source="pgeocode-local",
    )


def _remote_lookup(query: str, region_hint: str | None) -> GeocodedPoint | None:
    search = f"{query}, {region_hint}" if region_hint else query
    params = {
        "q": search,
        "format": "jsonv2",
        "addressdetails": 1,
        "limit": 1,
    }
    if settings.GEOCODER_COUNTRY_CODES:
        params["countrycodes"] = settings.GEOCODER_COUNTRY_CODES

    response = requests.get(
        f"{settings.NOMINATIM_API_BASE_URL}/search",
        params=params,
        headers={"User-Agent": settings.GEOLOOKUP_USER_AGENT},
        timeout=settings.EXTERNAL_API_TIMEOUT_SECONDS,
    )
    response.raise_for_status()

    payload = response.json()
    if not payload:
        return None

    item = payload[0]
    return GeocodedPoint(
        latitude=float(item["lat"]),
        longitude=float(item["lon"]),
        display_name=item.get("display_name", search),
        source="nominatim",
    )


def geocode_location(query: str, region_hint: str | None = None) -> GeocodedPoint:
    normalized_query = query.strip()
    if not normalized_query:
        raise GeocodingError("Location input cannot be empty")
    region_hint = region_hint.strip() if region_hint else None

    cache_key = _cache_key(normalized_query, region_hint)
    cached = cache.get(cache_key)
    if cached:
        return cached

    local = _local_lookup(normalized_query, region_hint)
    if local:
        logger.debug("Resolved %r locally to (%.5f, %.5f)", normalized_query, local.latitude, local.longitude)
        cache.set(cache_key, local, timeout=24 * 60 * 60)
        return local

    remote = _remote_lookup(normalized_query, region_hint)
    if remote:
        logger.debug("Resolved %r via Nominatim to (%.5f, %.5f)", normalized_query, remote.latitude, remote.longitude)
        cache.set(cache_key, remote, timeout=24 * 60 * 60)
        return remote

    raise LocationNotFoundError(f"Unable to geocode location: {normalized_query}")
