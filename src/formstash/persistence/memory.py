"""
FormStash Persistence Layer - Memory Backend

In-memory field storage for development, testing and single-process apps.
Data is lost when the application restarts.
"""

import logging
from typing import Dict, Iterator, Optional

from ..exceptions import StorageQuotaExceeded
from .base import StorageBackend

logger = logging.getLogger(__name__)


class MemoryStorage(StorageBackend):
    """
    Dict-backed storage with an optional size quota.

    The quota counts characters of keys plus values, the same way browser
    localStorage accounts for its limit. A write that would go over it raises
    StorageQuotaExceeded and leaves the previous value in place.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self.max_bytes = max_bytes

    @property
    def used_bytes(self) -> int:
        return sum(len(k) + len(v) for k, v in self._data.items())

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            current = self._data.get(key)
            freed = len(key) + len(current) if current is not None else 0
            needed = self.used_bytes - freed + len(key) + len(value)
            if needed > self.max_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {key!r} needs {needed} bytes, quota is {self.max_bytes}"
                )
        self._data[key] = value

    def delete(self, key: str) -> bool:
        existed = key in self._data
        self._data.pop(key, None)
        return existed

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def clear(self) -> None:
        """Drop every stored value."""
        self._data.clear()
        logger.debug("MemoryStorage cleared")


_shared_memory_storage: Optional[MemoryStorage] = None


def get_memory_storage() -> MemoryStorage:
    """Get the process-wide memory storage instance."""
    global _shared_memory_storage
    if _shared_memory_storage is None:
        _shared_memory_storage = MemoryStorage()
    return _shared_memory_storage
