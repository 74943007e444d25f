"""AppUser repositories package."""

from modules.accounts.repositories.django_repository import AppUserDjangoRepository
from modules.accounts.repositories.interfaces import IAppUserRepository

__all__ = ["IAppUserRepository", "AppUserDjangoRepository"]
