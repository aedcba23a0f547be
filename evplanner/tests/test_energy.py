from django.test import SimpleTestCase

from evplanner.domain.energy import (
    battery_after_distance,
    charging_time_hours,
    energy_for_distance_kwh,
    full_charge_time_hours,
    usable_range_km,
    validate_vehicle,
)
from evplanner.domain.errors import InvalidInputError, ZeroPowerError
from evplanner.domain.types import VehicleState


class RangeModelTests(SimpleTestCase):
    def test_usable_range_endpoints(self):
        for full_range in (1.0, 50.0, 300.0, 437.3):
            self.assertEqual(usable_range_km(100, full_range), full_range)
            self.assertEqual(usable_range_km(0, full_range), 0.0)

    def test_usable_range_is_linear(self):
        self.assertAlmostEqual(usable_range_km(80, 100), 80.0)
        self.assertAlmostEqual(usable_range_km(25, 300), 75.0)

    def test_min_threshold_reduces_usable_range(self):
        self.assertAlmostEqual(usable_range_km(80, 100, min_threshold_percent=30), 50.0)
        self.assertEqual(usable_range_km(20, 100, min_threshold_percent=30), 0.0)

    def test_battery_after_distance_never_negative(self):
        self.assertAlmostEqual(battery_after_distance(100, 50, 100), 50.0)
        self.assertEqual(battery_after_distance(10, 50, 100), 0.0)

    def test_validate_vehicle(self):
        validate_vehicle(VehicleState(battery_percent=0, full_range_km=1, battery_capacity_kwh=1))
        for vehicle in (
            VehicleState(battery_percent=101, full_range_km=300, battery_capacity_kwh=20),
            VehicleState(battery_percent=-1, full_range_km=300, battery_capacity_kwh=20),
            VehicleState(battery_percent=80, full_range_km=0, battery_capacity_kwh=20),
            VehicleState(battery_percent=80, full_range_km=300, battery_capacity_kwh=0),
        ):
            with self.assertRaises(InvalidInputError):
                validate_vehicle(vehicle)


class EnergyModelTests(SimpleTestCase):
    def test_charging_time_for_next_leg(self):
        self.assertAlmostEqual(energy_for_distance_kwh(80, 320, 40), 10.0)
        self.assertAlmostEqual(charging_time_hours(80, 320, 50, 40), 0.2)

    def test_charging_time_is_deterministic(self):
        first = charging_time_hours(123.4, 300, 22, 20)
        second = charging_time_hours(123.4, 300, 22, 20)
        self.assertEqual(first, second)

    def test_zero_power_fails_loudly(self):
        with self.assertRaises(ZeroPowerError):
            charging_time_hours(80, 320, 0, 40)
        with self.assertRaises(ZeroDivisionError):
            full_charge_time_hours(40, 0)

    def test_full_charge_time(self):
        self.assertAlmostEqual(full_charge_time_hours(20, 7.4), 20 / 7.4)
