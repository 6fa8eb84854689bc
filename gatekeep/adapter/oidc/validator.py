"""Shared OpenID Connect ID token validation."""

from typing import Any

import jwt
import logfire

from gatekeep.adapter.oidc.keys import SigningKeyCache
from gatekeep.domain.service.provider_token_service import ProviderTokenValidator
from gatekeep.domain.value import (
    AuthProvider,
    IdentityClaims,
    RejectionKind,
    TokenRejection,
)

ALGORITHM = "RS256"
REQUIRED_CLAIMS = ["sub", "iss", "exp", "iat"]


def reject(detail: str) -> TokenRejection:
    return TokenRejection(kind=RejectionKind.INVALID_TOKEN, detail=detail)


class OidcTokenValidator(ProviderTokenValidator):
    """Verifies RS256 ID tokens against a provider's published keys.

    Subclasses add the provider's issuer rules and map its claims. Every
    failure, including an unreachable key endpoint, is an invalid_token
    rejection; the reason is only logged.
    """

    provider: AuthProvider

    def __init__(self, key_cache: SigningKeyCache, clock_skew_seconds: int = 300) -> None:
        """Initialize validator.

        Args:
            key_cache: Signing keys of the provider
            clock_skew_seconds: Leeway applied to exp, nbf and iat
        """
        self.key_cache = key_cache
        self.clock_skew_seconds = clock_skew_seconds

    async def validate(
        self, raw_token: str, audience: str | None = None
    ) -> IdentityClaims | TokenRejection:
        with logfire.span("id_token.validate", provider=self.provider.value):
            try:
                header = jwt.get_unverified_header(raw_token)
            except jwt.InvalidTokenError as e:
                return reject(f"malformed token: {e}")

            if header.get("alg") != ALGORITHM:
                return reject(f"unexpected algorithm {header.get('alg')!r}")

            signing_key = await self.key_cache.get_key(header.get("kid"))
            if signing_key is None:
                return reject(f"no signing key for kid {header.get('kid')!r}")

            try:
                claims = jwt.decode(
                    raw_token,
                    signing_key.key,
                    algorithms=[ALGORITHM],
                    audience=audience,
                    leeway=self.clock_skew_seconds,
                    options={
                        "require": REQUIRED_CLAIMS,
                        "verify_aud": audience is not None,
                    },
                )
            except jwt.ExpiredSignatureError:
                return reject("token expired")
            except jwt.InvalidTokenError as e:
                return reject(str(e))

            problem = self.check_claims(claims)
            if problem:
                return reject(problem)

            return self.to_identity(claims)

    def check_claims(self, claims: dict[str, Any]) -> str | None:
        """Provider-specific checks on verified claims.

        Returns:
            A description of the first failed check, or None
        """
        return None

    def to_identity(self, claims: dict[str, Any]) -> IdentityClaims:
        return IdentityClaims(
            subject=str(claims["sub"]),
            email=str(claims.get("email") or ""),
            email_verified=claim_is_true(claims.get("email_verified")),
            issuer=str(claims["iss"]),
        )


def claim_is_true(value: Any) -> bool:
    """Boolean claims are sometimes sent as the strings "true"/"false"."""
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)
