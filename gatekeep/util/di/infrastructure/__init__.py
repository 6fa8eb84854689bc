"""Infrastructure providers."""

# Import bases
from .google import GoogleProvider
from .id_tokens import IdTokenAggregatorProvider
from .microsoft import MicrosoftProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .google import ProdGoogleProvider  # noqa: F401
from .microsoft import ProdMicrosoftProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "GoogleProvider",
    "IdTokenAggregatorProvider",
    "MicrosoftProvider",
    "PersistenceProvider",
    "ProdGoogleProvider",
    "ProdMicrosoftProvider",
    "ProdPersistenceProvider",
]
