from __future__ import annotations

from django.urls import path

from .views import ClimateAggregateView, ClimateLatestView, ClimateSeriesView

urlpatterns = [
    path(
        "climate/aggregate/",
        ClimateAggregateView.as_view(),
        name="climate-aggregate",
    ),
    path(
        "climate/latest/",
        ClimateLatestView.as_view(),
        name="climate-latest",
    ),
    path(
        "climate/series/",
        ClimateSeriesView.as_view(),
        name="climate-series",
    ),
]
