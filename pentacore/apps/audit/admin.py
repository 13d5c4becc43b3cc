from __future__ import annotations

from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "severity", "event_type", "action", "actor_id", "actor_role", "target_type", "target_id")
    list_filter = ("severity", "event_type", "actor_role")
    search_fields = ("action", "actor_id", "target_id")
    date_hierarchy = "created_at"

    # Append-only
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
