"""Encryption of provider API credentials at rest."""

from cryptography.fernet import Fernet

from gatekeep.util.error import ConfigurationError


class CredentialCipher:
    """Symmetric encryption for provider access/refresh tokens.

    Wraps a Fernet key. Without a key the cipher is disabled and callers are
    expected to skip storing credentials.
    """

    def __init__(self, key: str | None) -> None:
        """Initialize cipher.

        Args:
            key: urlsafe base64 Fernet key, or None to disable encryption

        Raises:
            ConfigurationError: If the key is not a valid Fernet key
        """
        if key:
            try:
                self._fernet: Fernet | None = Fernet(key.encode("ascii"))
            except ValueError as e:
                raise ConfigurationError(
                    "AUTH__PROVIDER_CREDENTIALS_KEY is not a valid Fernet key"
                ) from e
        else:
            self._fernet = None

    @property
    def enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, value: str) -> str:
        if self._fernet is None:
            raise ConfigurationError("Provider credential encryption is not configured")
        return self._fernet.encrypt(value.encode("utf-8")).decode("ascii")
