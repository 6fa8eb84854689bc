"""ID token infrastructure provider for multi-provider sign-in."""

from dishka import Scope, provide

from gatekeep.adapter.google import GoogleTokenValidator
from gatekeep.adapter.microsoft import MicrosoftTokenValidator
from gatekeep.domain.service import ProviderTokenValidator
from gatekeep.domain.value import AuthProvider
from gatekeep.util.di.base import ProviderBase


class IdTokenAggregatorProvider(ProviderBase):
    """Provider that aggregates all ID token validators into a dictionary."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_id_token_validators(
        self,
        google_token_validator: GoogleTokenValidator,
        microsoft_token_validator: MicrosoftTokenValidator,
    ) -> dict[AuthProvider, ProviderTokenValidator]:
        """Provide dictionary of ID token validators by provider.

        Facebook has no entry: it does not issue ID tokens to this flow.
        """
        return {
            AuthProvider.GOOGLE: google_token_validator,
            AuthProvider.MICROSOFT: microsoft_token_validator,
        }
