import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from evplanner.models import ChargingStation

VALID_ROWS = [
    {
        "station_id": "KL-001",
        "station_name": "Kannur Fast Charge",
        "city": "Kannur",
        "latitude": 11.8745,
        "longitude": 75.3704,
        "charger_type": "CCS2",
        "power_rating_kw": 60,
        "total_slots": 4,
        "available_slots": 2,
        "price_per_kwh": 18.5,
        "operational_status": "Operational",
    },
    {
        "station_id": "KL-002",
        "station_name": "Kozhikode Beach",
        "latitude": 11.2588,
        "longitude": 75.7804,
        "power_rating_kw": 30,
        "total_slots": 2,
        "available_slots": 5,
        "price_per_kwh": 15,
        "operational_status": "Under Maintenance",
    },
]


class ImportStationsCommandTests(TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)

    def _write(self, payload) -> str:
        path = Path(self._tmpdir.name) / "stations.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    def _import(self, payload, *extra):
        out = StringIO()
        call_command("import_stations", "--json", self._write(payload), *extra, stdout=out)
        return out.getvalue()

    def test_imports_valid_rows(self):
        output = self._import(VALID_ROWS)

        self.assertIn("Imported 2 charging stations", output)
        kozhikode = ChargingStation.objects.get(station_id="KL-002")
        self.assertEqual(kozhikode.available_slots, 2)
        self.assertEqual(kozhikode.operational_status, "UnderMaintenance")
        self.assertEqual(ChargingStation.objects.get(station_id="KL-001").city, "Kannur")

    def test_accepts_wrapped_payload_and_missing_status(self):
        row = dict(VALID_ROWS[0])
        del row["operational_status"]

        self._import({"data": [row]})

        self.assertEqual(ChargingStation.objects.get().operational_status, "Operational")

    def test_skips_invalid_and_duplicate_rows(self):
        rows = VALID_ROWS + [
            dict(VALID_ROWS[0]),
            {**VALID_ROWS[0], "station_id": "KL-003", "latitude": 95.0},
            {**VALID_ROWS[0], "station_id": "KL-004", "power_rating_kw": 0},
            {**VALID_ROWS[0], "station_id": "KL-005", "longitude": "east"},
            {"station_name": "No id"},
        ]

        output = self._import(rows)

        self.assertIn("Skipped 5 rows", output)
        self.assertEqual(ChargingStation.objects.count(), 2)

    def test_refuses_to_import_twice_without_clear(self):
        self._import(VALID_ROWS)

        with self.assertRaises(CommandError):
            self._import(VALID_ROWS)

        self._import(VALID_ROWS[:1], "--clear")
        self.assertEqual(ChargingStation.objects.count(), 1)

    def test_limit_caps_rows(self):
        self._import(VALID_ROWS, "--limit", "1")

        self.assertEqual(list(ChargingStation.objects.values_list("station_id", flat=True)), ["KL-001"])

    def test_missing_file_raises(self):
        with self.assertRaises(CommandError):
            call_command("import_stations", "--json", str(Path(self._tmpdir.name) / "nope.json"))
