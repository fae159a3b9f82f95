"""
FormStash Exceptions

Errors raised by storage backends and configuration helpers.
The persistence engine itself never raises these to the host page:
storage problems surface as a disabled engine or a logged warning.
"""


class FormStashError(Exception):
    """Base exception for FormStash"""
    pass


class StorageError(FormStashError):
    """Raised when a storage backend operation fails"""
    pass


class StorageQuotaExceeded(StorageError):
    """Raised when a write would exceed the backend's capacity"""
    pass


class StorageUnavailable(StorageError):
    """Raised when a storage backend cannot be used at all"""
    pass


class ConfigurationError(FormStashError):
    """Raised for invalid settings or unknown backend names"""
    pass
