"""Account constants."""

from django.db import models


class UserRole(models.TextChoices):
    ADMIN = "ADMIN", "Administrador"
    ESTOQUISTA = "ESTOQUISTA", "Estoquista"


XP_PER_LEVEL_STEP = 100
