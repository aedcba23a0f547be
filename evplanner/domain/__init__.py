from evplanner.domain.errors import InvalidInputError, PlanningError, ZeroPowerError
from evplanner.domain.planner import plan_geometry, plan_route, plan_sequential
from evplanner.domain.types import (
    Coordinate,
    OperationalStatus,
    PlanningOptions,
    RouteLeg,
    RoutePlan,
    RouteStop,
    Station,
    Stranded,
    VehicleState,
)

__all__ = [
    "Coordinate",
    "InvalidInputError",
    "OperationalStatus",
    "PlanningError",
    "PlanningOptions",
    "RouteLeg",
    "RoutePlan",
    "RouteStop",
    "Station",
    "Stranded",
    "VehicleState",
    "ZeroPowerError",
    "plan_geometry",
    "plan_route",
    "plan_sequential",
]
