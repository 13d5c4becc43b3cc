from django.apps import AppConfig
from django.conf import settings
from django.db.models.signals import post_migrate


def ensure_reviewers_group(sender, **kwargs):
    # Crea el grupo de revisores si no existe (idempotente)
    from django.contrib.auth.models import Group
    Group.objects.get_or_create(name=settings.PENTACORE.get("REVIEWERS_GROUP", "reviewers"))


class JudgingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pentacore.apps.judging'
    verbose_name = 'Revisión'

    def ready(self):
        # Conectamos el hook post_migrate una sola vez
        post_migrate.connect(ensure_reviewers_group, sender=self, dispatch_uid="judging.ensure_reviewers_group")
