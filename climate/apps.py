from __future__ import annotations

from django.apps import AppConfig


class ClimateConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "climate"
    verbose_name = "Climate"
