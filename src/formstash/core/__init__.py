"""
FormStash Core Module

Form model, key derivation, value encoding and the persistence engine.
"""

from .events import EventEmitter, FormEvent
from .controls import FieldKind, Form, FormControl, is_group_name
from .keys import form_identity, page_location, storage_key
from .codec import decode_into, encode_field
from .config import EngineConfiguration
from .timer import RepeatingTimer
from .engine import EngineState, PersistenceEngine
from .registry import EngineRegistry, engine_registry, protect_form

__all__ = [
    "EventEmitter",
    "FormEvent",
    "FieldKind",
    "Form",
    "FormControl",
    "is_group_name",
    "form_identity",
    "page_location",
    "storage_key",
    "decode_into",
    "encode_field",
    "EngineConfiguration",
    "RepeatingTimer",
    "EngineState",
    "PersistenceEngine",
    "EngineRegistry",
    "engine_registry",
    "protect_form",
]
