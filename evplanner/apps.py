from django.apps import AppConfig


class EvplannerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "evplanner"
