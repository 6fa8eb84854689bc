"""Microsoft identity provider adapter."""

from .validator import ISSUER_TEMPLATE, MicrosoftTokenValidator

__all__ = ["ISSUER_TEMPLATE", "MicrosoftTokenValidator"]
