"""
FormStash Persistence Layer - Mapping Backend

Stores fields inside any mutable mapping supplied by the host, typically a
Starlette/FastHTML session dict so form drafts follow the user's session.
"""

from typing import Iterator, MutableMapping, Optional

from .base import StorageBackend


class MappingStorage(StorageBackend):
    """
    Storage backend over a host-owned mutable mapping.

    Args:
        mapping: Mapping to store values in (e.g. ``request.session``)
        namespace: Optional prefix so form data does not collide with other
            entries the host keeps in the same mapping
    """

    def __init__(self, mapping: Optional[MutableMapping[str, str]] = None, namespace: str = ""):
        self.mapping = mapping if mapping is not None else {}
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def get(self, key: str) -> Optional[str]:
        value = self.mapping.get(self._key(key))
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self.mapping[self._key(key)] = value

    def delete(self, key: str) -> bool:
        return self.mapping.pop(self._key(key), None) is not None

    def keys(self) -> Iterator[str]:
        prefix_len = len(self.namespace)
        return iter([k[prefix_len:] for k in list(self.mapping) if k.startswith(self.namespace)])
