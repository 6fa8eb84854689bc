"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Configuration error."""

    pass


class SigningKeyMisconfiguredError(ConfigurationError):
    """Access token signing key is missing or too short.

    Raised at startup; the service must not run without a usable key.
    """

    pass
