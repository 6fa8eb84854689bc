"""Microsoft infrastructure providers."""

from dishka import Scope, provide

from gatekeep.adapter.microsoft import MicrosoftTokenValidator
from gatekeep.adapter.oidc.keys import DiscoverySigningKeySource, SigningKeyCache
from gatekeep.config import Settings
from gatekeep.util.di.base import ProviderBase


class MicrosoftProvider(ProviderBase):
    """Microsoft component base."""

    __mock_component__ = "microsoft"


class ProdMicrosoftProvider(MicrosoftProvider):
    """Production Microsoft provider; keys come from the v2.0 discovery document."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_microsoft_token_validator(
        self, settings: Settings
    ) -> MicrosoftTokenValidator:
        """Provide Microsoft ID token validator with its own key cache."""
        id_token = settings.auth.id_token
        microsoft = settings.auth.microsoft
        key_cache = SigningKeyCache(
            DiscoverySigningKeySource(
                microsoft.discovery_url,
                timeout_seconds=id_token.http_timeout_seconds,
            ),
            ttl_seconds=id_token.key_cache_ttl_seconds,
            min_refresh_interval_seconds=id_token.min_key_refresh_interval_seconds,
            name="microsoft",
        )
        return MicrosoftTokenValidator(
            key_cache,
            clock_skew_seconds=id_token.clock_skew_seconds,
            allowed_tenants=microsoft.tenant_allow_list,
        )
