"""Sign-in use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from gatekeep.config import AuthSettings
from gatekeep.domain.error import (
    AudienceMismatchError,
    InvalidProviderTokenError,
    MalformedRequestError,
)
from gatekeep.domain.service import (
    AccessTokenService,
    IdentityResolver,
    ProviderTokenService,
    RefreshTokenService,
)
from gatekeep.domain.value import (
    AuthProvider,
    ProviderCredentials,
    RejectionKind,
    TokenRejection,
)


class SignInRequest(BaseModel):
    """Sign-in request.

    For providers that issue ID tokens (Google, Microsoft) the subject and
    email are taken from the verified token. Facebook sign-ins send the
    subject and email directly.
    """

    provider: str = ""  # Case-insensitive provider name
    id_token: str | None = None
    provider_subject_id: str | None = None
    provider_email: str | None = None
    audience: str | None = None

    # Provider API credentials the client wants kept (encrypted at rest)
    provider_access_token: str | None = None
    provider_refresh_token: str | None = None
    provider_token_expires_at: datetime | None = None


class SignInResponse(BaseModel):
    """Sign-in response."""

    account_id: str
    username: str
    email: str
    display_name: str
    created_at: datetime
    last_login_at: datetime | None
    login_count: int
    access_token: str
    access_token_expires_in: int  # Seconds
    refresh_token: str


# Column widths of linked_identities
MAX_SUBJECT_LENGTH = 255
MAX_EMAIL_LENGTH = 320


def parse_provider(value: str | None) -> AuthProvider:
    """Parse a provider name, ignoring case.

    Raises:
        MalformedRequestError: If the provider is unknown
    """
    try:
        return AuthProvider(value or "")
    except ValueError:
        raise MalformedRequestError(f"Unsupported provider: {value}")


class SignInUseCase:
    """Use case for signing in with a third-party identity."""

    def __init__(
        self,
        provider_token_service: ProviderTokenService,
        identity_resolver: IdentityResolver,
        access_token_service: AccessTokenService,
        refresh_token_service: RefreshTokenService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize sign-in use case.

        Args:
            provider_token_service: ID token validation service
            identity_resolver: Account lookup/linking/creation service
            access_token_service: Access token issuance service
            refresh_token_service: Refresh token service
            auth_settings: Authentication settings
        """
        self.provider_token_service = provider_token_service
        self.identity_resolver = identity_resolver
        self.access_token_service = access_token_service
        self.refresh_token_service = refresh_token_service
        self.require_id_token = auth_settings.require_id_token

    async def execute(self, request: SignInRequest) -> SignInResponse:
        """Execute sign-in flow.

        Steps:
        1. Parse the provider
        2. Validate the ID token, if the provider issues them
        3. Resolve the identity to an account (find, link by email, or create)
        4. Issue an access token and a refresh token

        Args:
            request: Sign-in request

        Returns:
            Account summary with fresh tokens

        Raises:
            MalformedRequestError: Unknown provider, missing ID token or subject
            AudienceMismatchError: Requested audience differs from configuration
            InvalidProviderTokenError: ID token failed validation
        """
        provider = parse_provider(request.provider)

        with logfire.span("sign_in", provider=provider.value):
            subject = (request.provider_subject_id or "").strip()
            email = (request.provider_email or "").strip()
            email_verified = True
            tenant_id = None

            if self.provider_token_service.supports(provider):
                if request.id_token:
                    result = await self.provider_token_service.validate(
                        provider, request.id_token, request.audience
                    )
                    if isinstance(result, TokenRejection):
                        if result.kind == RejectionKind.AUDIENCE_MISMATCH:
                            raise AudienceMismatchError()
                        raise InvalidProviderTokenError()
                    # A validated token is the only source of identity
                    subject = result.subject.strip()
                    email = result.email.strip()
                    email_verified = result.email_verified
                    tenant_id = result.tenant_id
                elif self.require_id_token:
                    raise MalformedRequestError(
                        f"An ID token is required for {provider.value}"
                    )

            if not subject:
                raise MalformedRequestError("Provider subject ID is required")
            if len(subject) > MAX_SUBJECT_LENGTH:
                raise MalformedRequestError("Provider subject ID is too long")
            if len(email) > MAX_EMAIL_LENGTH:
                raise MalformedRequestError("Provider email is too long")

            credentials = ProviderCredentials(
                access_token=request.provider_access_token,
                refresh_token=request.provider_refresh_token,
                expires_at=request.provider_token_expires_at,
            )
            account = await self.identity_resolver.resolve(
                provider,
                subject,
                email,
                None if credentials.is_empty else credentials,
                email_verified=email_verified,
            )

            access_token = self.access_token_service.issue(
                account.id, account.username, account.email
            )
            refresh_token = await self.refresh_token_service.create(account.id)

            logfire.info(
                "Signed in",
                account_id=str(account.id),
                provider=provider.value,
                tenant_id=tenant_id,
                login_count=account.login_count,
            )

            return SignInResponse(
                account_id=str(account.id),
                username=account.username,
                email=account.email,
                display_name=account.display_name,
                created_at=account.created_at,
                last_login_at=account.last_login_at,
                login_count=account.login_count,
                access_token=access_token,
                access_token_expires_in=self.access_token_service.lifetime_seconds,
                refresh_token=refresh_token,
            )
