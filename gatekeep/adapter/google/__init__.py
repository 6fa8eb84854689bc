"""Google identity provider adapter."""

from .validator import GOOGLE_ISSUERS, GoogleTokenValidator

__all__ = ["GOOGLE_ISSUERS", "GoogleTokenValidator"]
