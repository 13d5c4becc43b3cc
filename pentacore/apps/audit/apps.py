from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pentacore.apps.audit'
    verbose_name = 'Auditoría'
