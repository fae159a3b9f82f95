"""
Engine configuration.

Options may be given in snake_case or in the camelCase spelling used by
page scripts (``excludeFields``, ``customKeyPrefix``, ...).
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..exceptions import ConfigurationError
from .controls import FormControl

Callback = Callable[..., Any]


class EngineConfiguration(BaseModel):
    """Options recognized by a persistence engine."""
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    # Controls, or field names, never captured or restored
    exclude_fields: List[Any] = Field(default_factory=list)
    # Appended to every derived key
    custom_key_prefix: str = ""
    # Include the page location in keys
    location_based: bool = False
    # Seconds between periodic saves; 0 disables periodic saving
    timeout: float = Field(default=0, ge=0)
    # Release stored data on form submit/reset
    auto_release: bool = True

    on_save: Optional[Callback] = None
    on_before_restore: Optional[Callback] = None
    on_restore: Optional[Callback] = None
    on_release: Optional[Callback] = None

    @classmethod
    def normalize(cls, options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Map camelCase aliases to field names, rejecting unknown options."""
        normalized: Dict[str, Any] = {}
        aliases = {info.alias: name for name, info in cls.model_fields.items()}
        for key, value in (options or {}).items():
            if key in cls.model_fields:
                normalized[key] = value
            elif key in aliases:
                normalized[aliases[key]] = value
            else:
                raise ConfigurationError(f"Unknown engine option: {key}")
        return normalized

    def merged(self, options: Optional[Mapping[str, Any]]) -> "EngineConfiguration":
        """Return a copy with options applied on top of the current values."""
        current = {name: getattr(self, name) for name in type(self).model_fields}
        current.update(self.normalize(options))
        return type(self).model_validate(current)

    def is_excluded(self, control: FormControl) -> bool:
        for item in self.exclude_fields:
            if item is control:
                return True
            if isinstance(item, str) and item == control.name:
                return True
        return False
