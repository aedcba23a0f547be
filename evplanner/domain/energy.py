from evplanner.domain.errors import InvalidInputError, ZeroPowerError
from evplanner.domain.types import VehicleState


def validate_vehicle(vehicle: VehicleState) -> VehicleState:
    if not 0.0 <= vehicle.battery_percent <= 100.0:
        raise InvalidInputError("Battery percent must be between 0 and 100")
    if vehicle.full_range_km <= 0:
        raise InvalidInputError("Full range must be greater than zero")
    if vehicle.battery_capacity_kwh <= 0:
        raise InvalidInputError("Battery capacity must be greater than zero")
    return vehicle


def usable_range_km(
    battery_percent: float,
    full_range_km: float,
    min_threshold_percent: float = 0.0,
) -> float:
    usable_percent = max(0.0, battery_percent - min_threshold_percent)
    return (usable_percent / 100.0) * full_range_km


def battery_after_distance(battery_percent: float, distance_km: float, full_range_km: float) -> float:
    return max(0.0, battery_percent - (distance_km / full_range_km) * 100.0)


def energy_for_distance_kwh(distance_km: float, full_range_km: float, battery_capacity_kwh: float) -> float:
    if full_range_km <= 0:
        raise InvalidInputError("Full range must be greater than zero")
    return battery_capacity_kwh / full_range_km * distance_km


def charging_time_hours(
    distance_km: float,
    full_range_km: float,
    power_kw: float,
    battery_capacity_kwh: float,
) -> float:
    """Hours of charging at ``power_kw`` needed to cover ``distance_km``."""
    if power_kw <= 0:
        raise ZeroPowerError(f"Charging power must be greater than zero, got {power_kw}")
    return energy_for_distance_kwh(distance_km, full_range_km, battery_capacity_kwh) / power_kw


def full_charge_time_hours(battery_capacity_kwh: float, power_kw: float) -> float:
    if power_kw <= 0:
        raise ZeroPowerError(f"Charging power must be greater than zero, got {power_kw}")
    return battery_capacity_kwh / power_kw
