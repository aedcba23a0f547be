import math
from collections.abc import Sequence

from evplanner.domain.errors import InvalidInputError
from evplanner.domain.types import Coordinate

EARTH_RADIUS_KM = 6371.0088


def validate_coordinate(coordinate: Coordinate) -> Coordinate:
    if not -90.0 <= coordinate.latitude <= 90.0:
        raise InvalidInputError(f"Latitude out of range: {coordinate.latitude}")
    if not -180.0 <= coordinate.longitude <= 180.0:
        raise InvalidInputError(f"Longitude out of range: {coordinate.longitude}")
    return coordinate


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def _initial_bearing(a: Coordinate, b: Coordinate) -> float:
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlon = math.radians(b.longitude - a.longitude)
    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return math.atan2(y, x)


def distance_to_segment_km(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Distance from ``point`` to the great-circle segment ``start``-``end``.

    Uses the cross-track distance when the point projects inside the segment
    and the distance to the nearer endpoint otherwise.
    """
    segment_length = distance_km(start, end)
    to_start = distance_km(start, point)
    if segment_length == 0.0 or to_start == 0.0:
        return to_start

    bearing_delta = _initial_bearing(start, point) - _initial_bearing(start, end)
    if math.cos(bearing_delta) < 0:
        return to_start

    angular_to_start = to_start / EARTH_RADIUS_KM
    cross_track = math.asin(max(-1.0, min(1.0, math.sin(angular_to_start) * math.sin(bearing_delta))))
    along_ratio = math.cos(angular_to_start) / math.cos(cross_track)
    along_track = math.acos(max(-1.0, min(1.0, along_ratio))) * EARTH_RADIUS_KM
    if along_track > segment_length:
        return distance_km(end, point)

    return abs(cross_track) * EARTH_RADIUS_KM


def distance_to_polyline_km(point: Coordinate, line: Sequence[Coordinate]) -> float:
    if len(line) < 2:
        raise InvalidInputError("A polyline needs at least two points to measure distance to it")

    return min(distance_to_segment_km(point, line[idx - 1], line[idx]) for idx in range(1, len(line)))


def cumulative_distance_km(line: Sequence[Coordinate]) -> float:
    total = 0.0
    for idx in range(1, len(line)):
        total += distance_km(line[idx - 1], line[idx])
    return total


def cumulative_route_distances(line: Sequence[Coordinate]) -> list[float]:
    if not line:
        return []

    cumulative = [0.0]
    total = 0.0
    for idx in range(1, len(line)):
        total += distance_km(line[idx - 1], line[idx])
        cumulative.append(total)
    return cumulative
