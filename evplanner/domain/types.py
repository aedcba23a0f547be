from dataclasses import dataclass, field
from enum import Enum

STRATEGY_GEOMETRY = "geometry"
STRATEGY_SEQUENTIAL = "sequential"
PLANNING_STRATEGIES = (STRATEGY_GEOMETRY, STRATEGY_SEQUENTIAL)

STOP_START = "start"
STOP_DESTINATION = "destination"
STOP_CHARGING = "charging_stop"


class OperationalStatus(str, Enum):
    OPERATIONAL = "Operational"
    UNDER_MAINTENANCE = "UnderMaintenance"
    CLOSED = "Closed"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Station:
    station_id: str
    name: str
    coordinate: Coordinate
    power_rating_kw: float
    available_slots: int
    total_slots: int
    operational_status: OperationalStatus
    price_per_kwh: float
    address: str = ""
    city: str = ""
    charger_type: str = ""


@dataclass(frozen=True)
class VehicleState:
    battery_percent: float
    full_range_km: float
    battery_capacity_kwh: float


@dataclass(frozen=True)
class PlanningOptions:
    lateral_search_start_km: float = 10.0
    lateral_search_step_km: float = 10.0
    lateral_search_max_km: float = 40.0
    max_full_charge_time_hours: float | None = 3.0
    min_battery_threshold_percent: float = 0.0
    route_corridor_km: float = 25.0
    lookahead_margin_points: int = 10


@dataclass(frozen=True)
class RouteStop:
    kind: str
    coordinate: Coordinate
    distance_from_start_km: float
    battery_percent: float
    station: Station | None = None
    charging_time_hours: float | None = None
    full_charge_time_hours: float | None = None


@dataclass(frozen=True)
class RouteLeg:
    polyline: tuple[Coordinate, ...]
    distance_km: float


@dataclass(frozen=True)
class RoutePlan:
    strategy: str
    stops: tuple[RouteStop, ...]
    polyline: tuple[Coordinate, ...]
    total_distance_km: float
    main_route_polyline: tuple[Coordinate, ...]
    main_route_distance_km: float
    charging_times_hours: tuple[float, ...]

    @property
    def charging_stops(self) -> tuple[RouteStop, ...]:
        return tuple(stop for stop in self.stops if stop.kind == STOP_CHARGING)

    @property
    def total_charging_time_hours(self) -> float:
        return sum(self.charging_times_hours)


@dataclass(frozen=True)
class Stranded:
    strategy: str
    reason: str
    position: Coordinate
    battery_percent: float
    stops: tuple[RouteStop, ...] = field(default_factory=tuple)
