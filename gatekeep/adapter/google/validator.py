"""Google ID token validation."""

from typing import Any

from gatekeep.adapter.oidc.validator import OidcTokenValidator
from gatekeep.domain.value import AuthProvider

GOOGLE_ISSUERS = frozenset({"https://accounts.google.com", "accounts.google.com"})


class GoogleTokenValidator(OidcTokenValidator):
    """Validates ID tokens from Google Sign-In."""

    provider = AuthProvider.GOOGLE

    def check_claims(self, claims: dict[str, Any]) -> str | None:
        if claims.get("iss") not in GOOGLE_ISSUERS:
            return f"unexpected issuer {claims.get('iss')!r}"
        return None
