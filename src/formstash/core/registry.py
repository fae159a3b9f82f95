"""
Engine Registry

Maps form objects to their persistence engine so a form is protected at most
once, no matter how many times page code asks for it.
"""

import logging
import weakref
from typing import Any, Dict, Mapping, Optional, Union

from starlette.datastructures import URL

from ..persistence import StorageAdapter, StorageBackend
from .controls import Form
from .engine import PersistenceEngine

logger = logging.getLogger(__name__)


class EngineRegistry:
    """
    Process-wide create-or-get / dispose registry of engines.

    Forms are weakly referenced: an entry disappears once page code drops
    its form.

    Args:
        default_storage: Storage for engines created without one
        default_options: Engine options applied before per-form options
    """

    def __init__(self, default_storage: Optional[Union[StorageBackend, StorageAdapter]] = None,
                 default_options: Optional[Mapping[str, Any]] = None):
        self.default_storage = default_storage
        self.default_options: Dict[str, Any] = dict(default_options or {})
        self._engines = weakref.WeakKeyDictionary()

    def create_or_get(self, form: Form,
                      storage: Optional[Union[StorageBackend, StorageAdapter]] = None,
                      location: Optional[Union[str, URL]] = None,
                      **options) -> PersistenceEngine:
        """
        Return the engine protecting form, creating and protecting one if needed.

        An existing engine is returned as is; storage, location and options
        are only used when the engine is created.
        """
        engine = self._engines.get(form)
        if engine is not None:
            return engine

        engine = PersistenceEngine(
            form,
            storage if storage is not None else self.default_storage,
            location,
        )
        engine.set_initial_options({**self.default_options, **options})
        engine.protect()
        self._engines[form] = engine
        logger.debug(f"Registered {engine!r}")
        return engine

    def get(self, form: Form) -> Optional[PersistenceEngine]:
        return self._engines.get(form)

    def dispose(self, form: Form) -> bool:
        """
        Unprotect a form and forget its engine.

        Returns:
            True if the form had an engine
        """
        engine = self._engines.pop(form, None)
        if engine is None:
            return False
        engine.unprotect()
        return True

    def clear(self) -> None:
        """Dispose every engine."""
        for form in list(self._engines):
            self.dispose(form)

    def __contains__(self, form: Form) -> bool:
        return form in self._engines

    def __len__(self) -> int:
        return len(self._engines)


# Global registry instance
engine_registry = EngineRegistry()


def protect_form(form: Form,
                 storage: Optional[Union[StorageBackend, StorageAdapter]] = None,
                 location: Optional[Union[str, URL]] = None,
                 **options) -> PersistenceEngine:
    """Protect a form through the global registry."""
    return engine_registry.create_or_get(form, storage=storage, location=location, **options)
