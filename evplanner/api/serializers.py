from django.conf import settings
from rest_framework import serializers

from evplanner.domain.types import PLANNING_STRATEGIES


class RoutePlanRequestSerializer(serializers.Serializer):
    start_location = serializers.CharField(max_length=255)
    destination_location = serializers.CharField(max_length=255)
    battery_percent = serializers.FloatField(
        default=settings.DEFAULT_BATTERY_PERCENT,
        min_value=0,
        max_value=100,
    )
    full_range_km = serializers.FloatField(default=settings.DEFAULT_FULL_RANGE_KM, min_value=1)
    battery_capacity_kwh = serializers.FloatField(default=settings.DEFAULT_BATTERY_CAPACITY_KWH, min_value=0.1)
    strategy = serializers.ChoiceField(
        choices=list(PLANNING_STRATEGIES),
        default=settings.DEFAULT_PLANNING_STRATEGY,
    )
    region_hint = serializers.CharField(
        max_length=255,
        default=settings.DEFAULT_REGION_HINT,
        allow_blank=True,
    )
    lateral_search_start_km = serializers.FloatField(
        default=settings.DEFAULT_LATERAL_SEARCH_START_KM,
        min_value=0.1,
    )
    lateral_search_step_km = serializers.FloatField(
        default=settings.DEFAULT_LATERAL_SEARCH_STEP_KM,
        min_value=0.1,
    )
    lateral_search_max_km = serializers.FloatField(
        default=settings.DEFAULT_LATERAL_SEARCH_MAX_KM,
        min_value=0.1,
    )
    max_full_charge_time_hours = serializers.FloatField(
        default=settings.DEFAULT_MAX_FULL_CHARGE_TIME_HOURS,
        min_value=0.1,
        allow_null=True,
        required=False,
    )
    min_battery_threshold_percent = serializers.FloatField(
        default=settings.DEFAULT_MIN_BATTERY_THRESHOLD_PERCENT,
        min_value=0,
        max_value=99,
    )

    def validate(self, attrs):
        errors: dict[str, str] = {}
        if attrs["start_location"].strip().lower() == attrs["destination_location"].strip().lower():
            errors["destination_location"] = "Start and destination cannot be the same."
        if attrs["lateral_search_max_km"] < attrs["lateral_search_start_km"]:
            errors["lateral_search_max_km"] = "Must be greater than or equal to lateral_search_start_km."

        if errors:
            raise serializers.ValidationError(errors)

        return attrs
