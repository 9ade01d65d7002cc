"""Domain services."""

from .base import Service
from .family_service import FamilyService
from .invite_service import InviteService
from .jwt_service import JWTService, SessionTokens
from .notifier import Notifier, dispatch_notification
from .user_service import UserService
from .verification_service import VerificationService

__all__ = [
    "FamilyService",
    "InviteService",
    "JWTService",
    "Notifier",
    "Service",
    "SessionTokens",
    "UserService",
    "VerificationService",
    "dispatch_notification",
]
