from collections.abc import Iterable, Sequence

from evplanner.domain.geo import distance_km, distance_to_polyline_km
from evplanner.domain.types import Coordinate, OperationalStatus, Station

EPSILON = 1e-9


def eligible_stations(
    stations: Iterable[Station],
    battery_capacity_kwh: float,
    max_full_charge_time_hours: float | None = 3.0,
) -> list[Station]:
    eligible: list[Station] = []
    for station in stations:
        if station.available_slots <= 0:
            continue
        if station.operational_status != OperationalStatus.OPERATIONAL:
            continue
        if station.power_rating_kw <= 0:
            continue
        if (
            max_full_charge_time_hours is not None
            and battery_capacity_kwh / station.power_rating_kw > max_full_charge_time_hours + EPSILON
        ):
            continue
        eligible.append(station)
    return eligible


def stations_near_route(
    route: Sequence[Coordinate],
    stations: Iterable[Station],
    max_distance_km: float,
) -> list[Station]:
    return [
        station
        for station in stations
        if distance_to_polyline_km(station.coordinate, route) <= max_distance_km + EPSILON
    ]


def stations_reachable_from(
    origin: Coordinate,
    stations: Iterable[Station],
    max_distance_km: float,
) -> list[Station]:
    return [station for station in stations if distance_km(origin, station.coordinate) <= max_distance_km + EPSILON]
