from django.contrib import admin
from django.urls import path, include

from pentacore.apps.core import views as core_views

urlpatterns = [
    path("admin/", admin.site.urls),

    # API healthcheck
    path("api/health/", core_views.health, name="api_health"),

    # Carga y revisión de puntuaciones (namespace 'judging')
    path("judging/", include(("pentacore.apps.judging.urls", "judging"), namespace="judging")),

    # Clasificaciones públicas
    path("leaderboard/", include("pentacore.apps.leaderboard.urls")),
]
