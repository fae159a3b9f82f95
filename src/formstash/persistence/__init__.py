"""
FormStash Persistence Module

Storage backends for saved form fields and the best-effort adapter the
engine uses in front of them.
"""

from typing import Dict, Type

from ..exceptions import ConfigurationError
from .base import StorageBackend
from .memory import MemoryStorage, get_memory_storage
from .mapping import MappingStorage
from .sql import SQLStorage, StoredField
from .adapter import StorageAdapter

# Registry of backend classes selectable by name
_storage_classes: Dict[str, Type[StorageBackend]] = {
    "memory": MemoryStorage,
    "mapping": MappingStorage,
    "sql": SQLStorage,
}


def register_storage(name: str, storage_cls: Type[StorageBackend]) -> None:
    """Register a storage backend class under a name."""
    _storage_classes[name] = storage_cls


def create_storage(name: str, **kwargs) -> StorageBackend:
    """
    Create a storage backend by name.

    Args:
        name: Registered backend name (memory, mapping, sql, ...)
        **kwargs: Passed to the backend constructor

    Raises:
        ConfigurationError: If no backend is registered under name
    """
    if name not in _storage_classes:
        raise ConfigurationError(
            f"Unknown storage backend: {name} (known: {', '.join(sorted(_storage_classes))})"
        )
    return _storage_classes[name](**kwargs)


__all__ = [
    "StorageBackend",
    "MemoryStorage",
    "get_memory_storage",
    "MappingStorage",
    "SQLStorage",
    "StoredField",
    "StorageAdapter",
    "register_storage",
    "create_storage",
]
