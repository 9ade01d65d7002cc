"""Token, hashing and email envelope primitives.

Formats:
- Tokens and email-bound invite codes: 16 random bytes, base64url, no padding
  (22 characters).
- Hashes: SHA-256, lowercase hex (64 characters).
- Legacy invite codes: ``INV-XXXX-XXXX-XXXX`` over an alphabet without the
  easily confused 0/O/1/I.
- Email envelope: ``base64(iv[12] || ciphertext || tag[16])`` under
  AES-256-GCM.
"""

import base64
import binascii
import hashlib
import re
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from kin.util.error import ConfigurationError, EmailDecryptionError

TOKEN_BYTES = 16
IV_LENGTH = 12
TAG_LENGTH = 16

LEGACY_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
LEGACY_CODE_PREFIX = "INV"

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")


def generate_token() -> str:
    """Generate a URL-safe random token.

    Returns:
        22-character base64url string carrying 128 bits of entropy
    """
    raw = secrets.token_bytes(TOKEN_BYTES)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def hash_value(value: str) -> str:
    """Hash a token or code for storage.

    Args:
        value: Plaintext token or code

    Returns:
        SHA-256 digest as 64 lowercase hex characters
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_legacy_invite_code() -> str:
    """Generate a human-typeable invite code like ``INV-7KQ2-MZ4P-WX9D``."""
    groups = [
        "".join(secrets.choice(LEGACY_CODE_ALPHABET) for _ in range(4))
        for _ in range(3)
    ]
    return "-".join([LEGACY_CODE_PREFIX, *groups])


def is_email_bound_code(code: str) -> bool:
    """Check whether a code has the shape of an email-bound invite code."""
    return len(code) == 22 and re.fullmatch(r"[A-Za-z0-9_-]{22}", code) is not None


def validate_invite_secret(secret: str | None) -> bytes:
    """Validate the invite encryption secret and decode it to a key.

    Args:
        secret: Hex-encoded 32-byte key

    Returns:
        32-byte AES key

    Raises:
        ConfigurationError: If the secret is missing or not 64 hex characters
    """
    if not secret:
        raise ConfigurationError(
            "INVITES__SECRET is not set. Generate one with: openssl rand -hex 32"
        )
    if len(secret) != 64:
        raise ConfigurationError(
            "INVITES__SECRET must be exactly 64 characters (32 bytes hex), "
            f"got {len(secret)} characters"
        )
    if not _HEX_KEY.match(secret):
        raise ConfigurationError(
            "INVITES__SECRET must be a valid 64-character hexadecimal string"
        )
    return bytes.fromhex(secret)


class EmailCipher:
    """Encrypts invitee email addresses at rest with AES-256-GCM."""

    def __init__(self, secret: str | None) -> None:
        """Initialize cipher.

        Args:
            secret: Hex-encoded 32-byte key

        Raises:
            ConfigurationError: If the secret is invalid
        """
        self._aesgcm = AESGCM(validate_invite_secret(secret))

    def encrypt(self, email: str) -> str:
        """Encrypt an email address.

        A fresh IV is drawn per call, so equal inputs give different envelopes.

        Args:
            email: Plaintext email

        Returns:
            Base64 envelope
        """
        iv = secrets.token_bytes(IV_LENGTH)
        # AESGCM appends the 16-byte tag to the ciphertext
        sealed = self._aesgcm.encrypt(iv, email.encode("utf-8"), None)
        return base64.b64encode(iv + sealed).decode("ascii")

    def decrypt(self, envelope: str) -> str:
        """Decrypt an email envelope.

        Args:
            envelope: Base64 envelope produced by ``encrypt``

        Returns:
            Plaintext email

        Raises:
            EmailDecryptionError: On any failure
        """
        try:
            raw = base64.b64decode(envelope, validate=True)
        except (binascii.Error, ValueError):
            raise EmailDecryptionError()

        if len(raw) < IV_LENGTH + TAG_LENGTH:
            raise EmailDecryptionError()

        iv, sealed = raw[:IV_LENGTH], raw[IV_LENGTH:]
        try:
            return self._aesgcm.decrypt(iv, sealed, None).decode("utf-8")
        except (InvalidTag, UnicodeDecodeError):
            raise EmailDecryptionError()
