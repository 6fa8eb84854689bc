"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from gatekeep.config import AuthSettings, Settings
from gatekeep.util.crypto import CredentialCipher
from gatekeep.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_credential_cipher(self, auth_settings: AuthSettings) -> CredentialCipher:
        """Provide cipher for provider credentials (disabled without a key)."""
        return CredentialCipher(auth_settings.provider_credentials_key)
