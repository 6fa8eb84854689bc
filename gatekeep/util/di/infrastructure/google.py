"""Google infrastructure providers."""

from dishka import Scope, provide

from gatekeep.adapter.google import GoogleTokenValidator
from gatekeep.adapter.oidc.keys import DiscoverySigningKeySource, SigningKeyCache
from gatekeep.config import Settings
from gatekeep.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider; keys come from Google's discovery document."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_token_validator(self, settings: Settings) -> GoogleTokenValidator:
        """Provide Google ID token validator with its own key cache.

        APP-scoped so the key cache is shared by all requests.
        """
        id_token = settings.auth.id_token
        key_cache = SigningKeyCache(
            DiscoverySigningKeySource(
                settings.auth.google.discovery_url,
                timeout_seconds=id_token.http_timeout_seconds,
            ),
            ttl_seconds=id_token.key_cache_ttl_seconds,
            min_refresh_interval_seconds=id_token.min_key_refresh_interval_seconds,
            name="google",
        )
        return GoogleTokenValidator(
            key_cache, clock_skew_seconds=id_token.clock_skew_seconds
        )
