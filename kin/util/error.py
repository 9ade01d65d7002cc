"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class EmailDecryptionError(UtilError):
    """Raised for any failure to open an encrypted email envelope.

    The message is the same for a bad tag, a truncated envelope and
    malformed base64.
    """

    def __init__(self) -> None:
        super().__init__("Email decryption failed")
