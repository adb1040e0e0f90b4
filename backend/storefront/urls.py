from pathlib import Path

from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse, JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.common.views import live_health, ready_health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.api.urls")),
    path("health/live", live_health, name="health-live"),
    path("health/ready", ready_health, name="health-ready"),
]


def _static_schema(request, fmt: str = "json"):  # pragma: no cover (simple IO)
    name = "openapi.json" if fmt == "json" else "openapi.yaml"
    file_path = Path(settings.BASE_DIR) / "static" / "schema" / name
    if not file_path.exists():
        return JsonResponse(
            {
                "error": "schema_not_found",
                "message": "Static schema not found. Run manage.py spectacular or enable DEBUG.",
            },
            status=404,
        )
    content_type = "application/json" if fmt == "json" else "application/yaml"
    return HttpResponse(file_path.read_text(), content_type=content_type)


# DEBUG serves the live schema; production serves the pre-generated file.
if settings.DEBUG:
    schema_url_name = "schema"
    urlpatterns.append(path("schema/", SpectacularAPIView.as_view(), name="schema"))
else:
    schema_url_name = "schema-json"
    urlpatterns += [
        path("schema/", _static_schema, name="schema-json"),
        path("schema.yaml", _static_schema, {"fmt": "yaml"}, name="schema-yaml"),
    ]

urlpatterns += [
    path(
        "docs/swagger/",
        SpectacularSwaggerView.as_view(url_name=schema_url_name),
        name="swagger-ui",
    ),
    path(
        "docs/redoc/",
        SpectacularRedocView.as_view(url_name=schema_url_name),
        name="redoc",
    ),
]
