"""Microsoft identity platform (v2.0) ID token validation.

Tokens from the multi-tenant "common" endpoint carry the issuing tenant in
the ``tid`` claim, and their issuer is specific to that tenant.
"""

from typing import Any

from gatekeep.adapter.oidc.keys import SigningKeyCache
from gatekeep.adapter.oidc.validator import OidcTokenValidator
from gatekeep.domain.value import AuthProvider, IdentityClaims

ISSUER_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/v2.0"


class MicrosoftTokenValidator(OidcTokenValidator):
    """Validates ID tokens from the Microsoft identity platform."""

    provider = AuthProvider.MICROSOFT

    def __init__(
        self,
        key_cache: SigningKeyCache,
        clock_skew_seconds: int = 300,
        allowed_tenants: list[str] | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            key_cache: Microsoft signing keys
            clock_skew_seconds: Leeway applied to exp, nbf and iat
            allowed_tenants: Accepted tenant IDs; empty or None accepts any
        """
        super().__init__(key_cache, clock_skew_seconds)
        self.allowed_tenants = frozenset(allowed_tenants or ())

    def check_claims(self, claims: dict[str, Any]) -> str | None:
        tenant_id = claims.get("tid")
        if not tenant_id:
            return "missing tid claim"

        expected_issuer = ISSUER_TEMPLATE.format(tenant_id=tenant_id)
        if claims.get("iss") != expected_issuer:
            return f"issuer {claims.get('iss')!r} does not match tenant {tenant_id}"

        if self.allowed_tenants and tenant_id not in self.allowed_tenants:
            return f"tenant {tenant_id} is not allowed"
        return None

    def to_identity(self, claims: dict[str, Any]) -> IdentityClaims:
        # Work and school accounts often have no email claim
        email = claims.get("email") or claims.get("preferred_username") or ""
        return IdentityClaims(
            subject=str(claims["sub"]),
            email=str(email),
            email_verified=bool(claims.get("email")),
            tenant_id=str(claims["tid"]),
            issuer=str(claims["iss"]),
        )
