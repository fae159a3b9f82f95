"""
Storage Adapter

Best-effort facade the persistence engine talks to. Wraps a StorageBackend
so that probing never raises and rejected writes never reach the host page.
"""

import logging
from typing import Any, Optional

from .base import StorageBackend

logger = logging.getLogger(__name__)

PROBE_KEY = "__formstash_probe__"


class StorageAdapter:
    """
    Uniform get/set/remove over a storage backend.

    Persistence is advisory: a write the backend rejects (quota exceeded,
    database error) is logged and dropped, and the caller carries on as if
    it had succeeded. Failed reads count as absent values.
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def is_available(self) -> bool:
        """
        Check whether the backend can actually be used.

        A backend may exist but fail on first use, so this performs a real
        write, read and delete of a probe key.
        """
        try:
            self.backend.set(PROBE_KEY, "1")
            usable = self.backend.get(PROBE_KEY) == "1"
            self.backend.delete(PROBE_KEY)
            return usable
        except Exception as e:
            logger.warning(f"{self.backend.__class__.__name__} is not available: {e}")
            return False

    def set(self, key: str, value: Any) -> None:
        """Store ``str(value)`` under key, swallowing rejected writes."""
        try:
            self.backend.set(key, str(value))
        except Exception as e:
            logger.warning(f"Write rejected for {key!r}: {e}")

    def get(self, key: str) -> Optional[str]:
        """Return the stored string for key, or None if never set or unreadable."""
        try:
            return self.backend.get(key)
        except Exception as e:
            logger.warning(f"Read failed for {key!r}: {e}")
            return None

    def remove(self, key: str) -> None:
        """Delete key; no-op if absent. Failed deletes are logged."""
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.warning(f"Delete failed for {key!r}: {e}")
