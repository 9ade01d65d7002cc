"""Domain layer errors.

Every domain error carries a ``kind`` that the interface layer maps to a
transport status. None of them are retried.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Category of a domain failure."""

    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"


class DomainError(Exception):
    """Base domain error."""

    kind: ErrorKind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        """Extra fields to surface alongside the message."""
        return {}


class BadRequestError(DomainError):
    """Malformed input or an operation the current state does not allow."""

    kind = ErrorKind.BAD_REQUEST


class ValidationError(BadRequestError):
    """Domain validation error."""

    pass


class ConflictError(DomainError):
    """Duplicate email, duplicate membership, full family, duplicate invite."""

    kind = ErrorKind.CONFLICT


class UnauthorizedError(DomainError):
    """Bad credentials or an unknown invite code on the anonymous path."""

    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(DomainError):
    """Caller lacks the role or identity the operation requires."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class EmailVerificationRequiredError(ForbiddenError):
    """Raised when an unverified account tries to sign in or create a family."""

    def __init__(self, email: str, message: str = "Please verify your email address"):
        self.email = email
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {"requires_email_verification": True, "email": self.email}


class InviteExpiredError(BadRequestError):
    """Invite or verification token is past its expiry."""

    def __init__(self, message: str = "This invite code has expired"):
        super().__init__(message)


class InviteAlreadyUsedError(BadRequestError):
    """Invite or verification token was already redeemed."""

    def __init__(self, message: str = "This invite code has already been used"):
        super().__init__(message)


class InviteRevokedError(BadRequestError):
    """Invite was revoked by a removal or deregistration."""

    def __init__(self, message: str = "This invite has been revoked"):
        super().__init__(message)


class InviteEmailMismatchError(ForbiddenError):
    """Invite was issued to a different email address."""

    def __init__(
        self, message: str = "This invite code was not sent to your email address"
    ):
        super().__init__(message)


class RateLimitExceededError(BadRequestError):
    """Too many requests within the throttling window."""

    def __init__(self, retry_after_seconds: int, message: str | None = None):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            message
            or "Too many verification emails requested. Please try again later."
        )

    def details(self) -> dict[str, Any]:
        return {"retry_after_seconds": self.retry_after_seconds}
