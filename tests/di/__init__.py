"""Mock providers for testing."""

from .google import MockGoogleProvider
from .microsoft import MockMicrosoftProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockGoogleProvider",
    "MockMicrosoftProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
