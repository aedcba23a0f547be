import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from evplanner.domain.types import OperationalStatus
from evplanner.models import ChargingStation
from evplanner.services.station_directory import normalize_status


class Command(BaseCommand):
    help = "Import charging stations from a JSON array into ChargingStation"

    def add_arguments(self, parser):
        parser.add_argument(
            "--json",
            default=str(settings.STATION_DATA_JSON_PATH),
            help="Path to the station JSON file",
        )
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete existing ChargingStation rows before import",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Optional row cap for local testing",
        )

    def handle(self, *args, **options):
        json_path = Path(options["json"]).expanduser().resolve()
        if not json_path.exists():
            raise CommandError(f"JSON file not found: {json_path}")

        rows = self._load_rows(json_path=json_path, limit=options["limit"])
        if not rows:
            raise CommandError("No station records found in JSON")

        self.stdout.write(self.style.NOTICE(f"Loaded {len(rows)} station records from JSON"))

        with transaction.atomic():
            if options["clear"]:
                deleted = ChargingStation.objects.all().delete()[0]
                self.stdout.write(self.style.WARNING(f"Deleted {deleted} ChargingStation rows"))
            elif ChargingStation.objects.exists():
                raise CommandError("ChargingStation table is not empty. Use --clear to avoid duplicate imports.")

            stations, skipped = self._build_station_rows(rows)
            ChargingStation.objects.bulk_create(stations, batch_size=1000)

        self.stdout.write(
            self.style.SUCCESS(f"Imported {len(stations)} charging stations. Skipped {skipped} rows with invalid data.")
        )

    def _load_rows(self, json_path: Path, limit: int | None) -> list[dict]:
        with json_path.open(encoding="utf-8") as infile:
            try:
                payload = json.load(infile)
            except json.JSONDecodeError as exc:
                raise CommandError(f"Invalid JSON in {json_path}: {exc}") from exc

        if isinstance(payload, dict):
            payload = payload.get("data", [])
        if not isinstance(payload, list):
            raise CommandError("Station JSON must be an array of station records")

        rows = [row for row in payload if isinstance(row, dict)]
        if limit:
            rows = rows[:limit]
        return rows

    def _build_station_rows(self, rows: list[dict]) -> tuple[list[ChargingStation], int]:
        stations: list[ChargingStation] = []
        seen_ids: set[str] = set()
        skipped_rows = 0

        for row in rows:
            station_id = str(row.get("station_id") or row.get("id") or "").strip()
            if not station_id or station_id in seen_ids:
                skipped_rows += 1
                continue

            try:
                latitude = float(row["latitude"])
                longitude = float(row["longitude"])
                power_rating_kw = float(row["power_rating_kw"])
                total_slots = int(row.get("total_slots") or 0)
                available_slots = int(row.get("available_slots") or 0)
                price_per_kwh = Decimal(str(row.get("price_per_kwh") or 0))
            except (KeyError, TypeError, ValueError, InvalidOperation):
                skipped_rows += 1
                continue

            if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
                skipped_rows += 1
                continue
            if power_rating_kw <= 0 or total_slots < 0 or available_slots < 0:
                skipped_rows += 1
                continue

            status = normalize_status(row.get("operational_status") or OperationalStatus.OPERATIONAL.value)
            seen_ids.add(station_id)
            stations.append(
                ChargingStation(
                    station_id=station_id,
                    station_name=str(row.get("station_name") or row.get("name") or station_id).strip(),
                    address=str(row.get("address") or "").strip(),
                    city=str(row.get("city") or "").strip(),
                    state=str(row.get("state") or "").strip(),
                    latitude=latitude,
                    longitude=longitude,
                    charger_type=str(row.get("charger_type") or "").strip(),
                    power_rating_kw=power_rating_kw,
                    total_slots=total_slots,
                    available_slots=min(available_slots, total_slots),
                    price_per_kwh=price_per_kwh,
                    operational_status=status.value,
                )
            )

        return stations, skipped_rows
