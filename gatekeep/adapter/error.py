"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class SigningKeyFetchError(AdapterError):
    """A provider's discovery document or key set could not be fetched."""

    pass
