from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)


def root(_request):
    return JsonResponse(
        {
            "service": "evplanner-api",
            "status": "ok",
            "endpoints": {
                "route_plan": {
                    "method": "POST",
                    "path": "/api/route-plan/",
                },
                "stations": {
                    "method": "GET",
                    "path": "/api/stations/",
                },
                "schema": "/api/schema/",
                "swagger_ui": "/api/docs/swagger/",
                "redoc": "/api/docs/redoc/",
            },
        }
    )


urlpatterns = [
    path("", root),
    path("api/", include("evplanner.api.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path(
        "api/docs/swagger/",
        SpectacularSwaggerView.as_view(url_name="api-schema"),
        name="api-docs-swagger",
    ),
    path(
        "api/docs/redoc/",
        SpectacularRedocView.as_view(url_name="api-schema"),
        name="api-docs-redoc",
    ),
]
