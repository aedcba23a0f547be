from django.db import models

from evplanner.domain.types import OperationalStatus


class ChargingStation(models.Model):
    STATUS_CHOICES = [(status.value, status.value) for status in OperationalStatus]

    station_id = models.CharField(max_length=64, unique=True)
    station_name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=128, blank=True, default="")
    state = models.CharField(max_length=128, blank=True, default="")
    latitude = models.FloatField()
    longitude = models.FloatField()
    charger_type = models.CharField(max_length=64, blank=True, default="")
    power_rating_kw = models.FloatField()
    total_slots = models.PositiveIntegerField(default=0)
    available_slots = models.PositiveIntegerField(default=0)
    price_per_kwh = models.DecimalField(max_digits=8, decimal_places=3, default=0)
    operational_status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=OperationalStatus.OPERATIONAL.value,
    )
    imported_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="evplanner_station_latlon_idx"),
            models.Index(fields=["operational_status"], name="evplanner_station_status_idx"),
        ]

    def __str__(self):
        return f"{self.station_name} ({self.station_id})"
