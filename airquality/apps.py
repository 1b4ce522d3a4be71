from __future__ import annotations

from django.apps import AppConfig


class AirQualityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "airquality"
    verbose_name = "Air quality"
