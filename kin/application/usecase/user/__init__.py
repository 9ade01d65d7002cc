"""User use cases."""

from .deregister_self import DeregisterSelfUseCase
from .get_user_public_key import GetUserPublicKeyUseCase
from .resolve_authors import ResolveAuthorsUseCase
from .update_user_preferences import UpdateUserPreferencesUseCase

__all__ = [
    "DeregisterSelfUseCase",
    "GetUserPublicKeyUseCase",
    "ResolveAuthorsUseCase",
    "UpdateUserPreferencesUseCase",
]
