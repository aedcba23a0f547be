import re

from evplanner.domain.types import Coordinate, OperationalStatus, Station
from evplanner.models import ChargingStation

STATUS_NORMALIZE_RE = re.compile(r"[^a-z]+")
STATUS_ALIASES = {
    "operational": OperationalStatus.OPERATIONAL,
    "active": OperationalStatus.OPERATIONAL,
    "available": OperationalStatus.OPERATIONAL,
    "open": OperationalStatus.OPERATIONAL,
    "undermaintenance": OperationalStatus.UNDER_MAINTENANCE,
    "maintenance": OperationalStatus.UNDER_MAINTENANCE,
    "closed": OperationalStatus.CLOSED,
    "inactive": OperationalStatus.CLOSED,
    "offline": OperationalStatus.CLOSED,
}


def normalize_status(value: str | None) -> OperationalStatus:
    """Map free-form directory status strings onto ``OperationalStatus``.

    Unknown values are treated as closed so they never become candidates.
    """
    key = STATUS_NORMALIZE_RE.sub("", (value or "").lower())
    return STATUS_ALIASES.get(key, OperationalStatus.CLOSED)


def to_station(row: ChargingStation) -> Station:
    return Station(
        station_id=row.station_id,
        name=row.station_name,
        coordinate=Coordinate(latitude=row.latitude, longitude=row.longitude),
        power_rating_kw=float(row.power_rating_kw),
        available_slots=int(row.available_slots),
        total_slots=int(row.total_slots),
        operational_status=normalize_status(row.operational_status),
        price_per_kwh=float(row.price_per_kwh),
        address=row.address,
        city=row.city,
        charger_type=row.charger_type,
    )


def list_stations() -> list[Station]:
    return [to_station(row) for row in ChargingStation.objects.order_by("station_id").iterator()]


def get_station(station_id: str) -> Station | None:
    row = ChargingStation.objects.filter(station_id=station_id).first()
    if row is None:
        return None
    return to_station(row)
