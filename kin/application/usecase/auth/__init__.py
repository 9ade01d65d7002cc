"""Authentication use cases."""

from .get_current_user import GetCurrentUserUseCase
from .login import LoginUseCase
from .refresh_session import RefreshSessionUseCase
from .register import RegisterUseCase
from .resend_verification_email import ResendVerificationEmailUseCase
from .verify_email import VerifyEmailUseCase

__all__ = [
    "GetCurrentUserUseCase",
    "LoginUseCase",
    "RefreshSessionUseCase",
    "RegisterUseCase",
    "ResendVerificationEmailUseCase",
    "VerifyEmailUseCase",
]
