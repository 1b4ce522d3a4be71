from __future__ import annotations

from django.urls import path

from .views import AirQualityView

urlpatterns = [
    path("air-quality/", AirQualityView.as_view(), name="air-quality"),
]
