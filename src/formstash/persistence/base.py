"""
FormStash Persistence Layer - Base Classes

This module provides the abstract interface for key-value storage backends.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional


class StorageBackend(ABC):
    """
    Abstract base class for field storage backends.

    A backend is a plain string-keyed, string-valued store. Backends are
    allowed to raise (quota errors, unreachable databases); callers that need
    best-effort behaviour wrap them in a StorageAdapter.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a stored value.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key was never set
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous value for the key.

        Args:
            key: Storage key
            value: String value to store

        Raises:
            StorageQuotaExceeded: If the backend has no room for the value
            StorageError: For any other backend failure
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Args:
            key: Storage key

        Returns:
            True if the key existed, False otherwise
        """
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over all stored keys."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return sum(1 for _ in self.keys())
