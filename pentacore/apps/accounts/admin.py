from django.contrib import admin
from .models import Profile

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "athlete", "phone")
    search_fields = ("user__username", "user__email", "athlete__last_name")
    autocomplete_fields = ["athlete"]
