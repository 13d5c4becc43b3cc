from __future__ import annotations

from django.contrib import admin

from .models import OfficialScore


@admin.register(OfficialScore)
class OfficialScoreAdmin(admin.ModelAdmin):
    list_display = ("athlete", "event", "discipline", "points", "age_category", "created_at")
    list_filter = ("discipline", "event__competition")
    search_fields = ("athlete__first_name", "athlete__last_name")

    # Inmutable: solo lectura desde el admin
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
