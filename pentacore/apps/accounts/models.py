from django.contrib.auth.models import User
from django.db import models


class Profile(models.Model):
    """Datos extra del usuario; ``athlete`` enlaza la cuenta con su ficha de atleta."""

    user = models.OneToOneField(User, on_delete=models.CASCADE)
    athlete = models.OneToOneField(
        "events.Athlete",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="profile",
    )
    phone = models.CharField(max_length=32, blank=True)

    def __str__(self):
        return self.user.get_full_name() or self.user.username
