"""Domain value objects for Kin.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

import base64
import binascii
import re
from enum import Enum

from pydantic import field_validator

from kin.domain.value.common import RootValueObject


class Role(str, Enum):
    """Role of a user within a family."""

    ADMIN = "admin"
    MEMBER = "member"


class InviteStatus(str, Enum):
    """Lifecycle status of a legacy/encrypted invite.

    PENDING_REGISTRATION invites target people without an account yet; they
    carry no key material until the invitee registers.
    """

    PENDING = "pending"
    PENDING_REGISTRATION = "pending_registration"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    REVOKED = "revoked"

    @property
    def is_open(self) -> bool:
        return self in (InviteStatus.PENDING, InviteStatus.PENDING_REGISTRATION)


OPEN_INVITE_STATUSES = (InviteStatus.PENDING, InviteStatus.PENDING_REGISTRATION)


# ISO 639-1 codes offered for message translation
SUPPORTED_LANGUAGES = (
    "en", "ja", "es", "fr", "de", "zh", "ko", "pt", "ru", "ar",
    "it", "nl", "pl", "tr", "vi", "th", "id", "hi", "sv", "no",
)  # fmt: skip


class EmailAddress(RootValueObject[str]):
    """Email address, trimmed.

    Only the overall shape is checked; deliverability is the mail provider's
    concern.
    """

    @field_validator("root")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email shape."""
        v = v.strip()
        if len(v) > 255 or not re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", v):
            raise ValueError("Invalid email address")
        return v


class PublicKey(RootValueObject[str]):
    """Curve25519 public key: 44 base64 characters decoding to 32 bytes."""

    @field_validator("root")
    @classmethod
    def validate_public_key(cls, v: str) -> str:
        """Validate key length and encoding."""
        if len(v) != 44:
            raise ValueError("Invalid public key format")
        try:
            decoded = base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Invalid public key format")
        if len(decoded) != 32:
            raise ValueError("Invalid public key format")
        return v


class Language(RootValueObject[str]):
    """Preferred translation language."""

    @field_validator("root")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Validate against supported languages."""
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language: {v}. "
                f"Supported: {', '.join(SUPPORTED_LANGUAGES)}"
            )
        return v
