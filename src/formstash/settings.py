"""
Configuration Management for FormStash

Process-level settings: which storage backend to use, default engine
options and logging. Settings can come from code, a dict or FORMSTASH_*
environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .core.registry import EngineRegistry, engine_registry
from .exceptions import ConfigurationError
from .persistence import StorageBackend, create_storage, get_memory_storage

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class FormStashSettings:
    """Complete FormStash configuration"""
    backend: str = "memory"
    database_url: str = "sqlite:///formstash.db"
    max_bytes: Optional[int] = None  # memory backend quota

    # Default engine options
    timeout: float = 0
    location_based: bool = False
    custom_key_prefix: str = ""
    auto_release: bool = True

    log_level: str = "INFO"
    log_format: str = LOG_FORMAT

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "FormStashSettings":
        """Create settings from a dictionary, ignoring unknown keys"""
        settings = cls()
        for key, value in config_dict.items():
            if hasattr(settings, key):
                setattr(settings, key, value)
            else:
                logger.warning(f"Ignoring unknown setting: {key}")
        return settings

    @classmethod
    def from_environment(cls) -> "FormStashSettings":
        """Create settings from FORMSTASH_* environment variables"""
        settings = cls()

        if os.getenv("FORMSTASH_BACKEND"):
            settings.backend = os.getenv("FORMSTASH_BACKEND")

        if os.getenv("FORMSTASH_DATABASE_URL"):
            settings.database_url = os.getenv("FORMSTASH_DATABASE_URL")

        if os.getenv("FORMSTASH_MAX_BYTES"):
            settings.max_bytes = int(os.getenv("FORMSTASH_MAX_BYTES"))

        if os.getenv("FORMSTASH_TIMEOUT"):
            try:
                settings.timeout = float(os.getenv("FORMSTASH_TIMEOUT"))
            except ValueError:
                raise ConfigurationError(f"FORMSTASH_TIMEOUT must be a number, got {os.getenv('FORMSTASH_TIMEOUT')!r}")

        if os.getenv("FORMSTASH_LOCATION_BASED"):
            settings.location_based = _env_bool(os.getenv("FORMSTASH_LOCATION_BASED"))

        if os.getenv("FORMSTASH_KEY_PREFIX"):
            settings.custom_key_prefix = os.getenv("FORMSTASH_KEY_PREFIX")

        if os.getenv("FORMSTASH_AUTO_RELEASE"):
            settings.auto_release = _env_bool(os.getenv("FORMSTASH_AUTO_RELEASE"))

        if os.getenv("FORMSTASH_LOG_LEVEL"):
            settings.log_level = os.getenv("FORMSTASH_LOG_LEVEL").upper()

        return settings

    def engine_options(self) -> Dict[str, Any]:
        """Default options for engines created by the registry"""
        return {
            "timeout": self.timeout,
            "location_based": self.location_based,
            "custom_key_prefix": self.custom_key_prefix,
            "auto_release": self.auto_release,
        }

    def build_storage(self) -> StorageBackend:
        """Create the configured storage backend"""
        if self.backend == "memory" and self.max_bytes is None:
            return get_memory_storage()
        if self.backend == "memory":
            return create_storage("memory", max_bytes=self.max_bytes)
        if self.backend == "sql":
            return create_storage("sql", database_url=self.database_url)
        return create_storage(self.backend)


def configure_logging(settings: FormStashSettings) -> None:
    """Apply the configured level and format to the formstash loggers"""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {settings.log_level}")

    package_logger = logging.getLogger("formstash")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.log_format))
        package_logger.addHandler(handler)


def configure_formstash(settings: Optional[FormStashSettings] = None,
                        registry: Optional[EngineRegistry] = None) -> EngineRegistry:
    """
    Configure FormStash for this process.

    Sets up logging, builds the storage backend and installs it, together
    with the default engine options, on the registry.

    Args:
        settings: Settings to apply (read from the environment when omitted)
        registry: Registry to configure (the global one when omitted)

    Returns:
        The configured registry

    Example:
        ```python
        from formstash import configure_formstash, protect_form

        configure_formstash(FormStashSettings(backend="sql", timeout=5))
        engine = protect_form(form, location=str(request.url))
        ```
    """
    settings = settings or FormStashSettings.from_environment()
    registry = registry if registry is not None else engine_registry

    configure_logging(settings)
    registry.default_storage = settings.build_storage()
    registry.default_options = settings.engine_options()

    logger.info(f"FormStash configured with {settings.backend} storage")
    return registry
