"""Domain layer errors.

The HTTP layer maps these to status codes: MalformedRequestError to 400,
AuthenticationError (and subclasses) to 401, NotFoundError to 404.
"""


class DomainError(Exception):
    """Base domain error."""

    pass


class MalformedRequestError(DomainError):
    """The request is missing required fields or names an unknown provider."""

    pass


class AuthenticationError(DomainError):
    """The caller could not be authenticated."""

    pass


class InvalidProviderTokenError(AuthenticationError):
    """A third-party ID token failed validation."""

    def __init__(self, message: str = "Invalid provider token"):
        super().__init__(message)


class AudienceMismatchError(AuthenticationError):
    """The requested audience differs from the configured client ID."""

    def __init__(self, message: str = "Audience mismatch"):
        super().__init__(message)


class InvalidOrExpiredRefreshTokenError(AuthenticationError):
    """A refresh token is unknown, expired, revoked or replayed."""

    def __init__(self, message: str = "Invalid or expired refresh token"):
        super().__init__(message)


class InvalidAccessTokenError(AuthenticationError):
    """An access token failed verification."""

    def __init__(self, message: str = "Invalid access token"):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class AccountNotFoundError(NotFoundError):
    """The account referenced by a token no longer exists."""

    def __init__(self, identifier: str):
        super().__init__("Account", identifier)


class IdentityConflictError(DomainError):
    """A provider identity is already linked to an account.

    Raised by repositories when the (provider, subject) uniqueness
    constraint rejects a write.
    """

    def __init__(self, provider: str, provider_subject_id: str):
        self.provider = provider
        self.provider_subject_id = provider_subject_id
        super().__init__(
            f"Identity already linked: {provider}/{provider_subject_id}"
        )
