from collections.abc import Sequence
from dataclasses import replace

from evplanner.domain.energy import charging_time_hours, full_charge_time_hours
from evplanner.domain.errors import InvalidInputError
from evplanner.domain.geo import cumulative_distance_km, distance_km
from evplanner.domain.types import (
    STOP_CHARGING,
    Coordinate,
    RoutePlan,
    RouteStop,
    VehicleState,
)

MIN_CHARGING_TIME_HOURS = 0.01


def stitch_legs(legs: Sequence[Sequence[Coordinate]]) -> tuple[Coordinate, ...]:
    if not legs:
        raise InvalidInputError("At least one leg is required to build a route")

    stitched: list[Coordinate] = list(legs[0])
    for leg in legs[1:]:
        # Each leg starts where the previous one ended.
        stitched.extend(leg[1:])
    return tuple(stitched)


def annotate_charging_times(
    stops: Sequence[RouteStop],
    vehicle: VehicleState,
    leg_distances_km: Sequence[float] | None = None,
) -> list[RouteStop]:
    """Attach the optimal (next-leg) and full charging times to each charging stop.

    ``leg_distances_km[i]`` is the road distance from ``stops[i]`` to
    ``stops[i + 1]``. Without it the straight-line distance is used.
    """
    if leg_distances_km is not None and len(leg_distances_km) != len(stops) - 1:
        raise InvalidInputError("Leg distances must match the number of legs between stops")

    annotated: list[RouteStop] = []
    for idx, stop in enumerate(stops):
        if stop.kind != STOP_CHARGING or stop.station is None:
            annotated.append(stop)
            continue

        if idx + 1 >= len(stops):
            next_leg_km = 0.0
        elif leg_distances_km is not None:
            next_leg_km = leg_distances_km[idx]
        else:
            next_leg_km = distance_km(stop.coordinate, stops[idx + 1].coordinate)

        power_kw = stop.station.power_rating_kw
        optimal_hours = charging_time_hours(
            distance_km=next_leg_km,
            full_range_km=vehicle.full_range_km,
            power_kw=power_kw,
            battery_capacity_kwh=vehicle.battery_capacity_kwh,
        )
        if optimal_hours < MIN_CHARGING_TIME_HOURS:
            optimal_hours = 0.0

        annotated.append(
            replace(
                stop,
                charging_time_hours=optimal_hours,
                full_charge_time_hours=full_charge_time_hours(vehicle.battery_capacity_kwh, power_kw),
            )
        )
    return annotated


def assemble_plan(
    strategy: str,
    stops: Sequence[RouteStop],
    polyline: Sequence[Coordinate],
    main_route_polyline: Sequence[Coordinate],
    vehicle: VehicleState,
    leg_distances_km: Sequence[float] | None = None,
) -> RoutePlan:
    annotated = annotate_charging_times(stops, vehicle, leg_distances_km)
    return RoutePlan(
        strategy=strategy,
        stops=tuple(annotated),
        polyline=tuple(polyline),
        total_distance_km=cumulative_distance_km(polyline),
        main_route_polyline=tuple(main_route_polyline),
        main_route_distance_km=cumulative_distance_km(main_route_polyline),
        charging_times_hours=tuple(
            stop.charging_time_hours or 0.0 for stop in annotated if stop.kind == STOP_CHARGING
        ),
    )
