import hashlib
import logging
from dataclasses import dataclass

import requests
from django.conf import settings
from django.core.cache import cache

from evplanner.domain.types import Coordinate, RouteLeg

logger = logging.getLogger(__name__)

KM_PER_METER = 0.001
NO_ROUTE_CODES = {"NoRoute", "NoSegment"}


@dataclass(frozen=True)
class RouteResult:
    distance_km: float
    duration_minutes: float
    polyline: tuple[Coordinate, ...]
    provider: str

    def as_leg(self) -> RouteLeg:
        return RouteLeg(polyline=self.polyline, distance_km=self.distance_km)


class RoutingError(Exception):
    pass


class NoRouteFoundError(RoutingError):
    pass


class ProviderUnavailableError(RoutingError):
    pass


def _cache_key(provider: str, points: list[Coordinate], profile: str = "") -> str:
    serialized = ";".join(f"{round(point.latitude, 5)}:{round(point.longitude, 5)}" for point in points)
    payload = f"{provider}:{profile}::{serialized}".encode("utf-8")
    return f"route::{hashlib.sha256(payload).hexdigest()}"


def _error_payload(response: requests.Response | None) -> dict | None:
    if response is None:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("code"):
        return payload
    return None


def _request_json(url: str, params: dict[str, str]) -> dict:
    try:
        response = requests.get(
            url,
            params=params,
            timeout=settings.EXTERNAL_API_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.HTTPError as exc:
        # Directions APIs answer "no route" with a 4xx and a coded body.
        payload = _error_payload(exc.response)
        if payload is not None:
            return payload
        raise ProviderUnavailableError(f"Routing provider returned an error: {exc}") from exc
    except requests.RequestException as exc:
        raise ProviderUnavailableError(f"Routing provider request failed: {exc}") from exc
    return response.json()


def _dedupe_consecutive_points(points: list[Coordinate]) -> list[Coordinate]:
    deduped: list[Coordinate] = []
    for point in points:
        if not deduped:
            deduped.append(point)
            continue
        prev = deduped[-1]
        if abs(prev.latitude - point.latitude) < 1e-7 and abs(prev.longitude - point.longitude) < 1e-7:
            continue
        deduped.append(point)
    return deduped


def _parse_route(payload: dict, provider: str, label: str) -> RouteResult:
    code = payload.get("code")
    if code in NO_ROUTE_CODES or (code == "Ok" and not payload.get("routes")):
        message = payload.get("message", "route not available")
        raise NoRouteFoundError(f"{label} directions found no route: {message}")
    if code != "Ok":
        message = payload.get("message", "unexpected response")
        raise ProviderUnavailableError(f"{label} directions failed: {message}")

    route = payload["routes"][0]
    return RouteResult(
        distance_km=float(route["distance"]) * KM_PER_METER,
        duration_minutes=float(route["duration"]) / 60.0,
        polyline=tuple(Coordinate(latitude=lat, longitude=lon) for lon, lat in route["geometry"]["coordinates"]),
        provider=provider,
    )


def _fetch_mapbox_route(points: list[Coordinate]) -> RouteResult:
    token = settings.MAPBOX_ACCESS_TOKEN
    if not token:
        raise ProviderUnavailableError("MAPBOX_ACCESS_TOKEN is required when MAP_PROVIDER=mapbox")

    if len(points) > 25:
        raise ProviderUnavailableError("Mapbox supports up to 25 coordinates per route request")

    profile = settings.MAPBOX_DIRECTIONS_PROFILE
    coordinate_string = ";".join(f"{point.longitude},{point.latitude}" for point in points)
    url = f"https://api.mapbox.com/directions/v5/mapbox/{profile}/{coordinate_string}"

    payload = _request_json(
        url,
        params={
            "alternatives": "false",
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
            "access_token": token,
        },
    )
    return _parse_route(payload, provider="mapbox", label="Mapbox")


def _fetch_osrm_route(points: list[Coordinate]) -> RouteResult:
    coordinate_string = ";".join(f"{point.longitude},{point.latitude}" for point in points)
    url = f"{settings.OSRM_API_BASE_URL}/route/v1/driving/{coordinate_string}"

    payload = _request_json(
        url,
        params={
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        },
    )
    return _parse_route(payload, provider="osrm", label="OSRM")


def _resolve_provider() -> str:
    value = settings.MAP_PROVIDER
    if value in {"mapbox", "osrm", "auto"}:
        return value
    return "auto"


def fetch_route_through_points(points: list[Coordinate]) -> RouteResult:
    if not points:
        raise NoRouteFoundError("At least one coordinate is required to build a route")

    normalized_points = _dedupe_consecutive_points(points)
    if len(normalized_points) < 2:
        point = normalized_points[0]
        return RouteResult(distance_km=0.0, duration_minutes=0.0, polyline=(point, point), provider="local")

    provider = _resolve_provider()
    candidate_providers = ["mapbox", "osrm"] if provider == "auto" else [provider]

    errors: list[RoutingError] = []
    for candidate in candidate_providers:
        profile = settings.MAPBOX_DIRECTIONS_PROFILE if candidate == "mapbox" else ""
        key = _cache_key(candidate, normalized_points, profile)
        cached = cache.get(key)
        if cached:
            return cached

        try:
            if candidate == "mapbox":
                result = _fetch_mapbox_route(normalized_points)
            else:
                result = _fetch_osrm_route(normalized_points)
        except RoutingError as exc:
            if provider != "auto":
                raise
            logger.warning("Routing provider %s failed, trying next: %s", candidate, exc)
            errors.append(exc)
            continue

        logger.debug(
            "Fetched %d-point route of %.2f km from %s", len(result.polyline), result.distance_km, result.provider
        )
        cache.set(key, result, timeout=24 * 60 * 60)
        return result

    detail = "; ".join(str(error) for error in errors) if errors else "No routing providers available"
    if errors and all(isinstance(error, NoRouteFoundError) for error in errors):
        raise NoRouteFoundError(f"Unable to build route: {detail}")
    raise ProviderUnavailableError(f"Unable to build route: {detail}")


def fetch_route(origin: Coordinate, destination: Coordinate) -> RouteResult:
    return fetch_route_through_points(points=[origin, destination])


def fetch_route_leg(origin: Coordinate, destination: Coordinate) -> RouteLeg:
    return fetch_route(origin, destination).as_leg()
