# backend/urls.py
"""
PROJECT URLS

/api/products/   menu products + ready-to-sell stock
/api/inventory/  ingredients, movement ledger, inventory reports
/api/sales/      checkout, orders, sales reports
/api/health/     liveness + DB check (no auth)

The admin site is mounted at settings.ADMIN_PATH (default "admin/").
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connection
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import OpenApiTypes, extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

logger = logging.getLogger(__name__)

MODULES = ("products", "inventory", "sales")


@extend_schema(responses={200: OpenApiTypes.OBJECT})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "Coffee POS Backend API is running",
            "docs": "/api/docs/",
            "schema": "/api/schema/",
            "token": "/api/auth/jwt/create/",
            "modules": {name: f"/api/{name}/" for name in MODULES},
        }
    )


@extend_schema(responses={200: OpenApiTypes.OBJECT, 503: OpenApiTypes.OBJECT})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """App is up and the default database answers a trivial query."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as exc:
        logger.warning("Health check: database unavailable", extra={"error": str(exc)})
        return Response({"status": "degraded", "db": "down"}, status=503)

    return Response(
        {
            "status": "ok",
            "db": "ok",
            "business_time_zone": settings.POS_BUSINESS_TIME_ZONE,
        }
    )


def _admin_path() -> str:
    value = (getattr(settings, "ADMIN_PATH", "") or "admin/").strip().lstrip("/")
    return value if value.endswith("/") else f"{value}/"


api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
] + [path(f"{name}/", include(f"{name}.urls")) for name in MODULES]

urlpatterns = [
    path(_admin_path(), admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
