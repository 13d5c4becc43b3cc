from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pentacore.apps.accounts'
    verbose_name = 'Cuentas'
