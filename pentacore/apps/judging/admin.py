from __future__ import annotations

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from pentacore.apps.core.errors import PipelineError

from .models import PreliminaryScore, ScoreStatus
from .services import lifecycle


@admin.register(PreliminaryScore)
class PreliminaryScoreAdmin(admin.ModelAdmin):
    list_display = ("id", "athlete", "event", "discipline", "status", "submitted_at", "verified_by")
    list_filter = ("status", "discipline", "event__competition")
    search_fields = ("athlete__first_name", "athlete__last_name")
    readonly_fields = (
        "data",
        "status",
        "corrected_data",
        "rejection_reason",
        "official_score",
        "submitted_at",
        "submitted_by",
        "verified_at",
        "verified_by",
    )
    actions = ["action_verify_selected"]

    @admin.action(description=_("Verificar puntuaciones pendientes seleccionadas"))
    def action_verify_selected(self, request, queryset):
        ok, failed = 0, 0
        for score in queryset.filter(status=ScoreStatus.PENDING):
            try:
                lifecycle.verify(score.pk, request.user, request=request)
                ok += 1
            except PipelineError as exc:
                failed += 1
                self.message_user(request, f"#{score.pk}: {exc.client_message}", level=messages.WARNING)
        self.message_user(request, f"{ok} verificadas, {failed} con error.", level=messages.SUCCESS)

    # Las transiciones pasan por el servicio; el admin no edita estados
    def has_delete_permission(self, request, obj=None):
        return False
