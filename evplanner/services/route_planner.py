import logging
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

from django.conf import settings

from evplanner.domain.errors import InvalidInputError
from evplanner.domain.geo import cumulative_distance_km
from evplanner.domain.planner import plan_route
from evplanner.domain.proximity import stations_near_route
from evplanner.domain.types import (
    Coordinate,
    PlanningOptions,
    RouteLeg,
    RoutePlan,
    RouteStop,
    Station,
    Stranded,
    VehicleState,
)
from evplanner.services.geocoding import GeocodedPoint, geocode_location
from evplanner.services.routing import fetch_route
from evplanner.services.station_directory import list_stations

logger = logging.getLogger(__name__)

# Marks an argument the caller left out, where None is itself a valid value.
USE_DEFAULT = object()


class _RequestRouteProvider:
    """Routing provider bound to one planning request.

    Repeated requests for the same pair reuse the first answer, so the main
    route is fetched once even when both the planner and the payload need it.
    """

    def __init__(self):
        self._legs: dict[tuple[Coordinate, Coordinate], RouteLeg] = {}
        self.api_calls = 0

    def __call__(self, origin: Coordinate, destination: Coordinate) -> RouteLeg:
        key = (origin, destination)
        if key not in self._legs:
            self.api_calls += 1
            self._legs[key] = fetch_route(origin, destination).as_leg()
        return self._legs[key]


def _serialize_coordinate(coordinate: Coordinate) -> dict[str, float]:
    return {"latitude": coordinate.latitude, "longitude": coordinate.longitude}


def _serialize_geometry(polyline: Sequence[Coordinate]) -> dict[str, Any]:
    return {
        "type": "LineString",
        "coordinates": [[point.longitude, point.latitude] for point in polyline],
    }


def serialize_station(station: Station) -> dict[str, Any]:
    return {
        "station_id": station.station_id,
        "name": station.name,
        "address": station.address,
        "city": station.city,
        "charger_type": station.charger_type,
        "power_rating_kw": station.power_rating_kw,
        "available_slots": station.available_slots,
        "total_slots": station.total_slots,
        "operational_status": station.operational_status.value,
        "price_per_kwh": station.price_per_kwh,
        "location": _serialize_coordinate(station.coordinate),
    }


def _serialize_stop(stop: RouteStop, sequence: int) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "sequence": sequence,
        "kind": stop.kind,
        "location": _serialize_coordinate(stop.coordinate),
        "distance_from_start_km": round(stop.distance_from_start_km, 3),
        "battery_percent": round(stop.battery_percent, 2),
    }
    if stop.station is not None:
        payload["station"] = serialize_station(stop.station)
        payload["charging_time_hours"] = (
            round(stop.charging_time_hours, 3) if stop.charging_time_hours is not None else None
        )
        payload["full_charge_time_hours"] = (
            round(stop.full_charge_time_hours, 3) if stop.full_charge_time_hours is not None else None
        )
    return payload


def _serialize_location(query: str, point: GeocodedPoint) -> dict[str, Any]:
    return {
        "query": query,
        "resolved": point.display_name,
        "latitude": point.latitude,
        "longitude": point.longitude,
        "source": point.source,
    }


def _serialize_smart_route(plan: RoutePlan) -> dict[str, Any]:
    return {
        "distance_km": round(plan.total_distance_km, 3),
        "geometry": _serialize_geometry(plan.polyline),
        "stops": [_serialize_stop(stop, sequence) for sequence, stop in enumerate(plan.stops, start=1)],
        "charging_times_hours": [round(value, 3) for value in plan.charging_times_hours],
        "total_charging_time_hours": round(plan.total_charging_time_hours, 3),
    }


def _serialize_stranded(result: Stranded) -> dict[str, Any]:
    return {
        "reason": result.reason,
        "position": _serialize_coordinate(result.position),
        "battery_percent": round(result.battery_percent, 2),
        "stops": [_serialize_stop(stop, sequence) for sequence, stop in enumerate(result.stops, start=1)],
    }


def build_route_plan(
    start_location: str,
    destination_location: str,
    battery_percent: float | None = None,
    full_range_km: float | None = None,
    battery_capacity_kwh: float | None = None,
    strategy: str | None = None,
    region_hint: str | None = None,
    lateral_search_start_km: float | None = None,
    lateral_search_step_km: float | None = None,
    lateral_search_max_km: float | None = None,
    max_full_charge_time_hours: float | None | object = USE_DEFAULT,
    min_battery_threshold_percent: float | None = None,
) -> dict[str, Any]:
    if battery_percent is None:
        battery_percent = float(settings.DEFAULT_BATTERY_PERCENT)
    if full_range_km is None:
        full_range_km = float(settings.DEFAULT_FULL_RANGE_KM)
    if battery_capacity_kwh is None:
        battery_capacity_kwh = float(settings.DEFAULT_BATTERY_CAPACITY_KWH)
    if strategy is None:
        strategy = settings.DEFAULT_PLANNING_STRATEGY
    if region_hint is None:
        region_hint = settings.DEFAULT_REGION_HINT or None
    if lateral_search_start_km is None:
        lateral_search_start_km = float(settings.DEFAULT_LATERAL_SEARCH_START_KM)
    if lateral_search_step_km is None:
        lateral_search_step_km = float(settings.DEFAULT_LATERAL_SEARCH_STEP_KM)
    if lateral_search_max_km is None:
        lateral_search_max_km = float(settings.DEFAULT_LATERAL_SEARCH_MAX_KM)
    if max_full_charge_time_hours is USE_DEFAULT:
        max_full_charge_time_hours = settings.DEFAULT_MAX_FULL_CHARGE_TIME_HOURS
    if min_battery_threshold_percent is None:
        min_battery_threshold_percent = float(settings.DEFAULT_MIN_BATTERY_THRESHOLD_PERCENT)

    origin = geocode_location(start_location, region_hint=region_hint)
    destination = geocode_location(destination_location, region_hint=region_hint)
    if origin.coordinate == destination.coordinate:
        raise InvalidInputError("Start and destination cannot be the same")

    vehicle = VehicleState(
        battery_percent=battery_percent,
        full_range_km=full_range_km,
        battery_capacity_kwh=battery_capacity_kwh,
    )
    options = PlanningOptions(
        lateral_search_start_km=lateral_search_start_km,
        lateral_search_step_km=lateral_search_step_km,
        lateral_search_max_km=lateral_search_max_km,
        max_full_charge_time_hours=max_full_charge_time_hours,
        min_battery_threshold_percent=min_battery_threshold_percent,
        route_corridor_km=float(settings.ROUTE_CORRIDOR_KM),
        lookahead_margin_points=int(settings.LOOKAHEAD_MARGIN_POINTS),
    )

    stations = list_stations()
    route_provider = _RequestRouteProvider()
    result = plan_route(
        strategy=strategy,
        origin=origin.coordinate,
        destination=destination.coordinate,
        stations=stations,
        vehicle=vehicle,
        route_provider=route_provider,
        options=options,
    )

    main_route = route_provider(origin.coordinate, destination.coordinate)
    display_corridor_km = float(settings.DISPLAY_STATION_CORRIDOR_KM)
    display_stations = stations_near_route(main_route.polyline, stations, display_corridor_km)

    payload: dict[str, Any] = {
        "status": "stranded" if isinstance(result, Stranded) else "ok",
        "origin": _serialize_location(start_location, origin),
        "destination": _serialize_location(destination_location, destination),
        "vehicle": asdict(vehicle),
        "main_route": {
            "distance_km": round(cumulative_distance_km(main_route.polyline), 3),
            "provider_distance_km": round(main_route.distance_km, 3),
            "geometry": _serialize_geometry(main_route.polyline),
        },
        "display_stations": [serialize_station(station) for station in display_stations],
        "meta": {
            "strategy": strategy,
            "route_api_calls": route_provider.api_calls,
            "stations_in_directory": len(stations),
            "display_station_corridor_km": display_corridor_km,
            "options": asdict(options),
            "assumptions": [
                "The battery is charged to 100% at every charging stop.",
                "Charging time is the minimum needed to reach the next stop, not a full charge.",
                "Energy use is linear in distance: battery capacity divided by full range per km.",
                "Only operational stations with free slots and a practical full-charge time are used.",
            ],
        },
    }

    if isinstance(result, Stranded):
        logger.info("Route %r -> %r stranded: %s", start_location, destination_location, result.reason)
        payload["stranded"] = _serialize_stranded(result)
    else:
        payload["smart_route"] = _serialize_smart_route(result)
    return payload
