"""
Хранилища данных.

`DataStore` - порт, `InMemoryDataStore` и `SqlDataStore` - реализации.
"""

from .memory_store import InMemoryDataStore
from .store import DataStore

__all__ = ["DataStore", "InMemoryDataStore"]
