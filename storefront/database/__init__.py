# Storage modules

from .products import ProductCatalog
from .storage import CartPersistence, FileStorage, KeyValueStorage, MemoryStorage, create_storage

__all__ = [
    "ProductCatalog",
    "CartPersistence",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "create_storage",
]
