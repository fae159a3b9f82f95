"""
FormStash - Form Draft Persistence

Keeps what a user has typed into a form across reloads, crashes and
accidental navigation, and puts it back when the form is shown again.

Quick Start:
    from formstash import Form, FormControl, protect_form

    form = Form([FormControl(name="title"), FormControl(name="body", tag="textarea")], id="post")
    engine = protect_form(form, timeout=5)
    form["title"].type_text("Draft title")   # saved immediately
    form.submit()                            # stored draft released
"""

from .core import (
    EngineConfiguration,
    EngineRegistry,
    EngineState,
    FieldKind,
    Form,
    FormControl,
    FormEvent,
    PersistenceEngine,
    RepeatingTimer,
    engine_registry,
    page_location,
    protect_form,
    storage_key,
)
from .exceptions import (
    ConfigurationError,
    FormStashError,
    StorageError,
    StorageQuotaExceeded,
    StorageUnavailable,
)
from .persistence import (
    MappingStorage,
    MemoryStorage,
    SQLStorage,
    StorageAdapter,
    StorageBackend,
    create_storage,
    get_memory_storage,
    register_storage,
)
from .settings import FormStashSettings, configure_formstash, configure_logging

__version__ = "0.1.0"

__all__ = [
    # Form model
    "Form",
    "FormControl",
    "FormEvent",
    "FieldKind",

    # Engine
    "PersistenceEngine",
    "EngineConfiguration",
    "EngineState",
    "EngineRegistry",
    "RepeatingTimer",
    "engine_registry",
    "protect_form",
    "page_location",
    "storage_key",

    # Storage
    "StorageBackend",
    "StorageAdapter",
    "MemoryStorage",
    "MappingStorage",
    "SQLStorage",
    "get_memory_storage",
    "create_storage",
    "register_storage",

    # Configuration
    "FormStashSettings",
    "configure_formstash",
    "configure_logging",

    # Errors
    "FormStashError",
    "StorageError",
    "StorageQuotaExceeded",
    "StorageUnavailable",
    "ConfigurationError",
]
