import math

from evplanner.domain.geo import EARTH_RADIUS_KM, cumulative_distance_km, distance_km
from evplanner.domain.types import Coordinate, OperationalStatus, RouteLeg, Station
from evplanner.services.routing import RouteResult

KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180.0
BASE_LONGITUDE = 76.0


def point_at(north_km: float, east_km: float = 0.0) -> Coordinate:
    """A point ``north_km`` up the 76E meridian from the equator, shifted ``east_km``."""
    return Coordinate(
        latitude=north_km / KM_PER_DEGREE,
        longitude=BASE_LONGITUDE + east_km / KM_PER_DEGREE,
    )


def straight_route(total_km: float, step_km: float = 5.0) -> tuple[Coordinate, ...]:
    steps = int(round(total_km / step_km))
    return tuple(point_at(idx * step_km) for idx in range(steps + 1))


def make_station(
    station_id: str,
    coordinate: Coordinate,
    power_rating_kw: float = 50.0,
    available_slots: int = 2,
    total_slots: int = 4,
    operational_status: OperationalStatus = OperationalStatus.OPERATIONAL,
) -> Station:
    return Station(
        station_id=station_id,
        name=f"Station {station_id}",
        coordinate=coordinate,
        power_rating_kw=power_rating_kw,
        available_slots=available_slots,
        total_slots=total_slots,
        operational_status=operational_status,
        price_per_kwh=12.5,
    )


def interpolate(origin: Coordinate, destination: Coordinate, step_km: float) -> tuple[Coordinate, ...]:
    pieces = max(1, math.ceil(distance_km(origin, destination) / step_km - 1e-9))
    points = [
        Coordinate(
            latitude=origin.latitude + (destination.latitude - origin.latitude) * idx / pieces,
            longitude=origin.longitude + (destination.longitude - origin.longitude) * idx / pieces,
        )
        for idx in range(pieces)
    ]
    points.append(destination)
    return tuple(points)


class FakeRouteProvider:
    """Straight-line road router that records every request in order."""

    def __init__(self, step_km: float = 5.0):
        self.step_km = step_km
        self.calls: list[tuple[Coordinate, Coordinate]] = []

    def __call__(self, origin: Coordinate, destination: Coordinate) -> RouteLeg:
        self.calls.append((origin, destination))
        polyline = interpolate(origin, destination, self.step_km)
        return RouteLeg(polyline=polyline, distance_km=cumulative_distance_km(polyline))


def fake_fetch_route(origin: Coordinate, destination: Coordinate) -> RouteResult:
    polyline = interpolate(origin, destination, step_km=5.0)
    return RouteResult(
        distance_km=cumulative_distance_km(polyline),
        duration_minutes=60.0,
        polyline=polyline,
        provider="osrm",
    )
