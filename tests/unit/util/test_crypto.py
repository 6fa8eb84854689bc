"""Unit tests for provider credential encryption."""

import pytest

from gatekeep.util.crypto import CredentialCipher
from gatekeep.util.error import ConfigurationError
from tests.factories import TEST_CREDENTIALS_KEY, make_cipher, read_credential


class TestCredentialCipher:
    """Tests for CredentialCipher."""

    def test_encrypt(self):
        """Test ciphertext differs from and decrypts to the plaintext."""
        # Arrange
        cipher = make_cipher()

        # Act
        ciphertext = cipher.encrypt("ya29.provider-access-token")

        # Assert
        assert cipher.enabled is True
        assert "ya29" not in ciphertext
        assert read_credential(ciphertext, TEST_CREDENTIALS_KEY) == (
            "ya29.provider-access-token"
        )

    def test_encryption_is_randomized(self):
        """Test the same credential never encrypts to the same ciphertext."""
        cipher = make_cipher()

        assert cipher.encrypt("secret") != cipher.encrypt("secret")

    def test_disabled_without_key(self):
        """Test a cipher without key is disabled and refuses to encrypt."""
        cipher = CredentialCipher(None)

        assert cipher.enabled is False
        with pytest.raises(ConfigurationError):
            cipher.encrypt("secret")

    def test_invalid_key(self):
        """Test a malformed key is a configuration error."""
        with pytest.raises(ConfigurationError):
            CredentialCipher("not-a-fernet-key")
