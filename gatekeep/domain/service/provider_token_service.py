"""Third-party ID token validation domain service."""

import logfire

from gatekeep.config import AuthSettings
from gatekeep.domain.value import (
    AuthProvider,
    IdentityClaims,
    RejectionKind,
    TokenRejection,
)

from .base import Service


class ProviderTokenValidator:
    """ID token validator interface, one implementation per provider."""

    async def validate(
        self, raw_token: str, audience: str | None = None
    ) -> IdentityClaims | TokenRejection:
        """Validate an ID token issued by the provider.

        Args:
            raw_token: Compact-serialized JWT
            audience: Required "aud" value, or None to skip the audience check

        Returns:
            Verified claims, or a rejection. Implementations never raise for
            bad tokens or unreachable key endpoints.
        """
        raise NotImplementedError


class ProviderTokenService(Service):
    """Routes ID tokens to the validator of the provider that issued them.

    The configured client ID of a provider always wins over the audience a
    caller asks for; a caller asking for a different one is refused before
    the token is looked at.
    """

    def __init__(
        self,
        validators: dict[AuthProvider, ProviderTokenValidator],
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize provider token service.

        Args:
            validators: Map of provider to ID token validator
            auth_settings: Authentication settings (client IDs)
        """
        self.validators = validators
        self.client_ids: dict[AuthProvider, str | None] = {
            AuthProvider.GOOGLE: auth_settings.google.client_id,
            AuthProvider.MICROSOFT: auth_settings.microsoft.client_id,
        }

    def supports(self, provider: AuthProvider) -> bool:
        """Whether ID tokens from this provider can be validated."""
        return provider in self.validators

    async def validate(
        self,
        provider: AuthProvider,
        raw_token: str,
        requested_audience: str | None = None,
    ) -> IdentityClaims | TokenRejection:
        """Validate an ID token for a provider.

        Args:
            provider: Provider that issued the token
            raw_token: Compact-serialized JWT
            requested_audience: Audience the caller expects, if any

        Returns:
            Verified claims, or a rejection
        """
        with logfire.span("provider_token_service.validate", provider=provider.value):
            validator = self.validators.get(provider)
            if validator is None:
                logfire.warn("No ID token validator", provider=provider.value)
                return TokenRejection(
                    kind=RejectionKind.INVALID_TOKEN,
                    detail=f"no validator for {provider.value}",
                )

            configured = self.client_ids.get(provider) or None
            requested = requested_audience or None
            if configured and requested and configured != requested:
                logfire.warn(
                    "Requested audience does not match configured client ID",
                    provider=provider.value,
                )
                return TokenRejection(
                    kind=RejectionKind.AUDIENCE_MISMATCH,
                    detail="requested audience differs from configured client ID",
                )

            result = await validator.validate(raw_token, configured or requested)
            if isinstance(result, TokenRejection):
                logfire.warn(
                    "ID token rejected",
                    provider=provider.value,
                    kind=result.kind.value,
                    detail=result.detail,
                )
            else:
                logfire.info("ID token validated", provider=provider.value)
            return result
