from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ChargingStation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("station_id", models.CharField(max_length=64, unique=True)),
                ("station_name", models.CharField(max_length=255)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=128)),
                ("state", models.CharField(blank=True, default="", max_length=128)),
                ("latitude", models.FloatField()),
                ("longitude", models.FloatField()),
                ("charger_type", models.CharField(blank=True, default="", max_length=64)),
                ("power_rating_kw", models.FloatField()),
                ("total_slots", models.PositiveIntegerField(default=0)),
                ("available_slots", models.PositiveIntegerField(default=0)),
                ("price_per_kwh", models.DecimalField(decimal_places=3, default=0, max_digits=8)),
                (
                    "operational_status",
                    models.CharField(
                        choices=[
                            ("Operational", "Operational"),
                            ("UnderMaintenance", "UnderMaintenance"),
                            ("Closed", "Closed"),
                        ],
                        default="Operational",
                        max_length=32,
                    ),
                ),
                ("imported_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["latitude", "longitude"], name="evplanner_station_latlon_idx"),
                    models.Index(fields=["operational_status"], name="evplanner_station_status_idx"),
                ],
            },
        ),
    ]
