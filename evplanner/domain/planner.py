import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import replace

from evplanner.domain.assembler import assemble_plan, stitch_legs
from evplanner.domain.energy import battery_after_distance, usable_range_km, validate_vehicle
from evplanner.domain.errors import InvalidInputError
from evplanner.domain.geo import (
    cumulative_distance_km,
    cumulative_route_distances,
    distance_km,
    validate_coordinate,
)
from evplanner.domain.proximity import eligible_stations, stations_near_route, stations_reachable_from
from evplanner.domain.types import (
    STOP_CHARGING,
    STOP_DESTINATION,
    STOP_START,
    STRATEGY_GEOMETRY,
    STRATEGY_SEQUENTIAL,
    Coordinate,
    PlanningOptions,
    RouteLeg,
    RoutePlan,
    RouteStop,
    Station,
    Stranded,
    VehicleState,
)

logger = logging.getLogger(__name__)

EPSILON = 1e-9
FULL_BATTERY_PERCENT = 100.0

RouteProvider = Callable[[Coordinate, Coordinate], RouteLeg]


def validate_options(options: PlanningOptions) -> PlanningOptions:
    if options.lateral_search_start_km <= 0:
        raise InvalidInputError("Lateral search start must be greater than zero")
    if options.lateral_search_step_km <= 0:
        raise InvalidInputError("Lateral search step must be greater than zero")
    if options.lateral_search_max_km < options.lateral_search_start_km:
        raise InvalidInputError("Lateral search max cannot be smaller than the start radius")
    if options.max_full_charge_time_hours is not None and options.max_full_charge_time_hours <= 0:
        raise InvalidInputError("Max full charge time must be greater than zero")
    if not 0.0 <= options.min_battery_threshold_percent < FULL_BATTERY_PERCENT:
        raise InvalidInputError("Minimum battery threshold must be between 0 and 100")
    if options.route_corridor_km <= 0:
        raise InvalidInputError("Route corridor must be greater than zero")
    if options.lookahead_margin_points < 0:
        raise InvalidInputError("Lookahead margin cannot be negative")
    return options


def _validate_polyline(line: Sequence[Coordinate]) -> None:
    if len(line) < 2:
        raise InvalidInputError("A route needs at least two points")
    for point in line:
        validate_coordinate(point)


def _without_station(stations: Iterable[Station], station_id: str) -> list[Station]:
    return [station for station in stations if station.station_id != station_id]


def _usable_range(battery_percent: float, vehicle: VehicleState, options: PlanningOptions) -> float:
    return usable_range_km(battery_percent, vehicle.full_range_km, options.min_battery_threshold_percent)


def plan_geometry(
    route: Sequence[Coordinate],
    stations: Iterable[Station],
    vehicle: VehicleState,
    options: PlanningOptions | None = None,
) -> RoutePlan | Stranded:
    """Insert charging stops along an already computed route.

    Stations within the route corridor are candidates. At every step the
    nearest reachable station that gets closer to the destination is chosen,
    falling back to the nearest reachable one.
    """
    options = validate_options(options or PlanningOptions())
    validate_vehicle(vehicle)
    _validate_polyline(route)

    remaining = stations_near_route(
        route,
        eligible_stations(stations, vehicle.battery_capacity_kwh, options.max_full_charge_time_hours),
        options.route_corridor_km,
    )
    destination = route[-1]
    current = route[0]
    battery = vehicle.battery_percent
    travelled_km = 0.0
    stops: list[RouteStop] = [
        RouteStop(kind=STOP_START, coordinate=current, distance_from_start_km=0.0, battery_percent=battery)
    ]

    while True:
        distance_to_destination = distance_km(current, destination)
        usable = _usable_range(battery, vehicle, options)
        if usable >= distance_to_destination:
            travelled_km += distance_to_destination
            stops.append(
                RouteStop(
                    kind=STOP_DESTINATION,
                    coordinate=destination,
                    distance_from_start_km=travelled_km,
                    battery_percent=battery_after_distance(battery, distance_to_destination, vehicle.full_range_km),
                )
            )
            break

        reachable = sorted(
            (
                (distance_km(current, station.coordinate), station)
                for station in stations_reachable_from(current, remaining, usable)
            ),
            key=lambda item: item[0],
        )
        if not reachable:
            logger.info(
                "Geometry planning stranded at (%.5f, %.5f) with %.1f%% battery",
                current.latitude,
                current.longitude,
                battery,
            )
            return Stranded(
                strategy=STRATEGY_GEOMETRY,
                reason="No reachable charging station within usable range",
                position=current,
                battery_percent=battery,
                stops=tuple(stops),
            )

        leg_km, station = reachable[0]
        for candidate_km, candidate in reachable:
            if distance_km(candidate.coordinate, destination) < distance_to_destination:
                leg_km, station = candidate_km, candidate
                break

        travelled_km += leg_km
        logger.debug("Charging stop %s selected %.2f km from the previous stop", station.station_id, leg_km)
        stops.append(
            RouteStop(
                kind=STOP_CHARGING,
                coordinate=station.coordinate,
                distance_from_start_km=travelled_km,
                battery_percent=battery,
                station=station,
            )
        )
        remaining = _without_station(remaining, station.station_id)
        battery = FULL_BATTERY_PERCENT
        current = station.coordinate

    return assemble_plan(
        strategy=STRATEGY_GEOMETRY,
        stops=stops,
        polyline=route,
        main_route_polyline=route,
        vehicle=vehicle,
    )


def _search_radii(options: PlanningOptions) -> Iterator[float]:
    step = 0
    radius = options.lateral_search_start_km
    while radius <= options.lateral_search_max_km + EPSILON:
        yield radius
        step += 1
        radius = options.lateral_search_start_km + step * options.lateral_search_step_km


def _find_station_expanding(
    reference: Sequence[Coordinate],
    current_index: int,
    next_index: int,
    stations: Sequence[Station],
    usable: float,
    options: PlanningOptions,
) -> Station | None:
    window = reference[current_index : next_index + options.lookahead_margin_points]
    if len(window) < 2:
        return None

    run_out_point = reference[next_index - 1]
    reachable = stations_reachable_from(reference[current_index], stations, usable)
    for radius in _search_radii(options):
        candidates = stations_near_route(window, reachable, radius)
        if candidates:
            logger.debug("Found %d candidate stations within %.1f km of the route", len(candidates), radius)
            return min(candidates, key=lambda station: distance_km(run_out_point, station.coordinate))
    return None


def plan_sequential(
    origin: Coordinate,
    destination: Coordinate,
    stations: Iterable[Station],
    vehicle: VehicleState,
    route_provider: RouteProvider,
    options: PlanningOptions | None = None,
) -> RoutePlan | Stranded:
    """Walk the reference route leg by leg, searching widening bands for stations.

    The station chosen at each stop is the one closest to where the range
    runs out. The final polyline is rebuilt from one road leg per pair of
    consecutive stops, requested in order.
    """
    options = validate_options(options or PlanningOptions())
    validate_vehicle(vehicle)
    validate_coordinate(origin)
    validate_coordinate(destination)

    reference = tuple(route_provider(origin, destination).polyline)
    if len(reference) < 2:
        raise InvalidInputError("The reference route must contain at least two points")

    cumulative = cumulative_route_distances(reference)
    remaining = eligible_stations(stations, vehicle.battery_capacity_kwh, options.max_full_charge_time_hours)
    battery = vehicle.battery_percent
    current_index = 0
    stop_points: list[Coordinate] = [origin]
    stops: list[RouteStop] = [
        RouteStop(kind=STOP_START, coordinate=origin, distance_from_start_km=0.0, battery_percent=battery)
    ]

    while True:
        usable = _usable_range(battery, vehicle, options)
        next_index = current_index + 1
        travelled_km = 0.0
        while next_index < len(reference):
            segment_km = distance_km(reference[next_index - 1], reference[next_index])
            if travelled_km + segment_km > usable:
                break
            travelled_km += segment_km
            next_index += 1

        if next_index >= len(reference):
            stop_points.append(destination)
            stops.append(
                RouteStop(
                    kind=STOP_DESTINATION,
                    coordinate=destination,
                    distance_from_start_km=cumulative[-1],
                    battery_percent=battery_after_distance(battery, travelled_km, vehicle.full_range_km),
                )
            )
            break

        station = None
        # A full battery that cannot clear the next segment would stop here forever.
        if next_index > current_index + 1 or battery < FULL_BATTERY_PERCENT:
            station = _find_station_expanding(reference, current_index, next_index, remaining, usable, options)
        if station is None:
            position = reference[current_index]
            logger.info(
                "Sequential planning stranded at (%.5f, %.5f) with %.1f%% battery",
                position.latitude,
                position.longitude,
                battery,
            )
            return Stranded(
                strategy=STRATEGY_SEQUENTIAL,
                reason="No reachable charging station within the maximum search radius",
                position=position,
                battery_percent=battery,
                stops=tuple(stops),
            )

        logger.debug("Charging stop %s selected near route index %d", station.station_id, next_index - 1)
        stop_points.append(station.coordinate)
        stops.append(
            RouteStop(
                kind=STOP_CHARGING,
                coordinate=station.coordinate,
                distance_from_start_km=cumulative[next_index - 1],
                battery_percent=battery,
                station=station,
            )
        )
        remaining = _without_station(remaining, station.station_id)
        battery = FULL_BATTERY_PERCENT
        current_index = next_index - 1

    legs: list[RouteLeg] = []
    for leg_origin, leg_destination in zip(stop_points, stop_points[1:]):
        legs.append(route_provider(leg_origin, leg_destination))

    # Distances from start follow the stitched road legs, not the reference route.
    running_km = 0.0
    for idx, leg in enumerate(legs, start=1):
        running_km += cumulative_distance_km(leg.polyline)
        stops[idx] = replace(stops[idx], distance_from_start_km=running_km)

    return assemble_plan(
        strategy=STRATEGY_SEQUENTIAL,
        stops=stops,
        polyline=stitch_legs([leg.polyline for leg in legs]),
        main_route_polyline=reference,
        vehicle=vehicle,
        leg_distances_km=[leg.distance_km for leg in legs],
    )


def plan_route(
    strategy: str,
    origin: Coordinate,
    destination: Coordinate,
    stations: Iterable[Station],
    vehicle: VehicleState,
    route_provider: RouteProvider,
    options: PlanningOptions | None = None,
) -> RoutePlan | Stranded:
    if strategy == STRATEGY_GEOMETRY:
        validate_coordinate(origin)
        validate_coordinate(destination)
        main_route = route_provider(origin, destination)
        return plan_geometry(main_route.polyline, stations, vehicle, options)
    if strategy == STRATEGY_SEQUENTIAL:
        return plan_sequential(origin, destination, stations, vehicle, route_provider, options)
    raise InvalidInputError(f"Unknown planning strategy: {strategy}")
