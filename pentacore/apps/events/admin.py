from __future__ import annotations

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from .models import Athlete, Competition, Event


# -----------------------------
# Event (inline en la competencia)
# -----------------------------
class EventInline(admin.TabularInline):
    model = Event
    extra = 0
    fields = ["discipline", "order", "scheduled_at"]
    ordering = ("order",)


# -----------------------------
# Competition
# -----------------------------
@admin.register(Competition)
class CompetitionAdmin(admin.ModelAdmin):
    list_display = ("name", "age_category", "competition_type", "status", "start_date")
    list_filter = ("status", "age_category", "competition_type")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [EventInline]
    actions = ["action_create_events"]

    @admin.action(description=_("Crear disciplinas faltantes"))
    def action_create_events(self, request, queryset):
        created = 0
        for comp in queryset:
            before = comp.events.count()
            comp.ensure_events()
            created += comp.events.count() - before
        self.message_user(request, f"{created} disciplinas creadas.", level=messages.SUCCESS)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("competition", "order", "discipline", "scheduled_at")
    list_filter = ("competition", "discipline")
    ordering = ("competition", "order")


# -----------------------------
# Athlete
# -----------------------------
@admin.register(Athlete)
class AthleteAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "country", "gender", "date_of_birth", "club")
    list_filter = ("country", "gender")
    search_fields = ("first_name", "last_name", "club")
