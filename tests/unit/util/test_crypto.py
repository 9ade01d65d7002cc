"""Unit tests for token, hashing and email envelope primitives."""

import base64
import re

import pytest

from kin.util.crypto import (
    EmailCipher,
    generate_legacy_invite_code,
    generate_token,
    hash_value,
    is_email_bound_code,
    validate_invite_secret,
)
from kin.util.error import ConfigurationError, EmailDecryptionError

SECRET = "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"


class TestTokens:
    """Tests for token and code generation."""

    def test_token_is_22_char_base64url(self):
        """Tokens should be 22 base64url characters without padding."""
        token = generate_token()

        assert len(token) == 22
        assert re.fullmatch(r"[A-Za-z0-9_-]{22}", token)
        assert is_email_bound_code(token)

    def test_tokens_are_unique(self):
        """Tokens should not repeat."""
        assert len({generate_token() for _ in range(200)}) == 200

    def test_hash_is_sha256_hex(self):
        """Hash should be the 64-char lowercase SHA-256 hex digest."""
        assert (
            hash_value("abc")
            == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_legacy_code_format(self):
        """Legacy codes should look like INV-XXXX-XXXX-XXXX."""
        code = generate_legacy_invite_code()

        assert re.fullmatch(r"INV-[A-HJ-NP-Z2-9]{4}-[A-HJ-NP-Z2-9]{4}-[A-HJ-NP-Z2-9]{4}", code)
        assert not is_email_bound_code(code)


class TestInviteSecret:
    """Tests for validate_invite_secret()."""

    def test_valid_secret_decodes_to_32_bytes(self):
        assert len(validate_invite_secret(SECRET)) == 32

    @pytest.mark.parametrize("secret", [None, "", "abc", "zz" * 32, SECRET + "00"])
    def test_invalid_secret_raises(self, secret):
        """Missing, short, long or non-hex secrets should be rejected."""
        with pytest.raises(ConfigurationError):
            validate_invite_secret(secret)


class TestEmailCipher:
    """Tests for EmailCipher."""

    def test_decrypt_returns_original_email(self):
        cipher = EmailCipher(SECRET)

        assert cipher.decrypt(cipher.encrypt("bob@example.com")) == "bob@example.com"

    def test_encrypt_is_not_deterministic(self):
        """Equal inputs should produce different envelopes."""
        cipher = EmailCipher(SECRET)

        assert cipher.encrypt("bob@example.com") != cipher.encrypt("bob@example.com")

    def test_envelope_layout(self):
        """Envelope should be base64(iv[12] || ciphertext || tag[16])."""
        cipher = EmailCipher(SECRET)
        raw = base64.b64decode(cipher.encrypt("bob@example.com"))

        assert len(raw) == 12 + len("bob@example.com") + 16

    def test_tampered_envelope_fails(self):
        """Flipping any byte should fail decryption."""
        cipher = EmailCipher(SECRET)
        raw = bytearray(base64.b64decode(cipher.encrypt("bob@example.com")))

        for index in (0, 12, len(raw) - 1):
            tampered = bytearray(raw)
            tampered[index] ^= 0x01
            with pytest.raises(EmailDecryptionError):
                cipher.decrypt(base64.b64encode(bytes(tampered)).decode())

    def test_wrong_key_fails(self):
        envelope = EmailCipher(SECRET).encrypt("bob@example.com")
        other = EmailCipher("ff" * 32)

        with pytest.raises(EmailDecryptionError):
            other.decrypt(envelope)

    @pytest.mark.parametrize("envelope", ["not base64!", "", base64.b64encode(b"short").decode()])
    def test_malformed_envelope_fails_uniformly(self, envelope):
        """Malformed input should give the same error as a bad tag."""
        cipher = EmailCipher(SECRET)

        with pytest.raises(EmailDecryptionError) as exc_info:
            cipher.decrypt(envelope)
        assert str(exc_info.value) == "Email decryption failed"
