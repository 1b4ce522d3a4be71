"""URL configuration for the enviro-apis project."""

# Routes:
# - GET / -> home
# - /metrics -> Prometheus exposition
# - /api/schema/ -> OpenAPI schema
# - /api/docs/ -> Swagger UI
# - /api/redoc/ -> ReDoc
# - /api/v1/climate/ -> climate.urls
# - /api/v1/air-quality/ -> airquality.urls

from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from .views import home

urlpatterns = [
    path("", home, name="home"),
    path("", include("django_prometheus.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path(
        "api/redoc/",
        SpectacularRedocView.as_view(url_name="schema"),
        name="redoc",
    ),
    path("api/v1/", include("climate.urls")),
    path("api/v1/", include("airquality.urls")),
]
