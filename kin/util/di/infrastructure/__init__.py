"""Infrastructure providers."""

# Import bases
from .notifier import NotifierProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .notifier import ProdNotifierProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "NotifierProvider",
    "PersistenceProvider",
    "ProdNotifierProvider",
    "ProdPersistenceProvider",
]
