from django.apps import AppConfig


class EventsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pentacore.apps.events'
    verbose_name = 'Competencias'
