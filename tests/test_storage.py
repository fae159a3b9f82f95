"""
Storage Backend Tests

Memory, mapping and SQL backends, the backend factory and the best-effort
StorageAdapter in front of them.
"""

import logging

import pytest

from formstash import (
    ConfigurationError,
    MappingStorage,
    MemoryStorage,
    SQLStorage,
    StorageAdapter,
    StorageError,
    StorageQuotaExceeded,
    create_storage,
    get_memory_storage,
    register_storage,
)
from formstash.persistence.adapter import PROBE_KEY


class TestMemoryStorage:
    """In-memory backend"""

    def test_set_get_delete(self):
        storage = MemoryStorage()
        assert storage.get("k") is None
        storage.set("k", "v")
        assert storage.get("k") == "v"
        assert "k" in storage
        assert storage.delete("k") is True
        assert storage.delete("k") is False
        assert storage.get("k") is None

    def test_keys_and_len(self):
        storage = MemoryStorage()
        storage.set("a", "1")
        storage.set("b", "2")
        assert sorted(storage.keys()) == ["a", "b"]
        assert len(storage) == 2
        storage.clear()
        assert len(storage) == 0

    def test_quota(self):
        storage = MemoryStorage(max_bytes=10)
        storage.set("k", "12345")
        with pytest.raises(StorageQuotaExceeded):
            storage.set("other", "12345")
        assert storage.get("other") is None

    def test_quota_counts_replaced_value_once(self):
        storage = MemoryStorage(max_bytes=10)
        storage.set("k", "123456789")
        storage.set("k", "987654321")
        assert storage.get("k") == "987654321"

    def test_shared_instance(self):
        assert get_memory_storage() is get_memory_storage()


class TestMappingStorage:
    """Mapping backend over a host dict"""

    def test_namespace_is_applied(self):
        session = {"user_id": "42"}
        storage = MappingStorage(session, namespace="formstash:")
        storage.set("signupemail", "me@example.com")
        assert session["formstash:signupemail"] == "me@example.com"
        assert storage.get("signupemail") == "me@example.com"
        assert list(storage.keys()) == ["signupemail"]

    def test_delete(self):
        storage = MappingStorage({})
        storage.set("k", "v")
        assert storage.delete("k") is True
        assert storage.delete("k") is False


class TestSQLStorage:
    """SQLModel backend"""

    @pytest.fixture
    def storage(self):
        storage = SQLStorage("sqlite://")
        yield storage
        storage.dispose()

    def test_round_trip(self, storage):
        storage.set("signupbio", "hello world")
        assert storage.get("signupbio") == "hello world"

    def test_overwrite(self, storage):
        storage.set("k", "first")
        storage.set("k", "second")
        assert storage.get("k") == "second"
        assert list(storage.keys()) == ["k"]

    def test_delete(self, storage):
        storage.set("k", "v")
        assert storage.delete("k") is True
        assert storage.get("k") is None
        assert storage.delete("k") is False

    def test_errors_are_wrapped(self, storage):
        with storage.engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE formstash_field")

        for call in (
            lambda: storage.get("k"),
            lambda: storage.set("k", "v"),
            lambda: storage.delete("k"),
            lambda: list(storage.keys()),
        ):
            with pytest.raises(StorageError):
                call()

    def test_file_database_survives_reopen(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'drafts.db'}"
        first = SQLStorage(url)
        first.set("k", "persisted")
        first.dispose()

        second = SQLStorage(url)
        assert second.get("k") == "persisted"
        second.dispose()


class TestFactory:
    """Backend selection by name"""

    def test_create_known_backends(self):
        assert isinstance(create_storage("memory"), MemoryStorage)
        assert isinstance(create_storage("mapping", mapping={}), MappingStorage)

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            create_storage("floppy")

    def test_register_backend(self):
        class TracingStorage(MemoryStorage):
            pass

        register_storage("tracing", TracingStorage)
        assert isinstance(create_storage("tracing"), TracingStorage)


class ExplodingStorage(MemoryStorage):
    def set(self, key, value):
        raise OSError("disk full")


class UnreadableStorage(MemoryStorage):
    def get(self, key):
        raise StorageError("database down")

    def delete(self, key):
        raise StorageError("database down")


class TestStorageAdapter:
    """Best-effort facade"""

    def test_available_backend(self):
        backend = MemoryStorage()
        adapter = StorageAdapter(backend)
        assert adapter.is_available() is True
        assert backend.get(PROBE_KEY) is None, "Probe key is cleaned up"

    def test_unavailable_backend(self):
        assert StorageAdapter(ExplodingStorage()).is_available() is False

    def test_set_coerces_to_string(self):
        backend = MemoryStorage()
        adapter = StorageAdapter(backend)
        adapter.set("flag", True)
        adapter.set("count", 3)
        assert backend.get("flag") == "True"
        assert backend.get("count") == "3"

    def test_rejected_write_is_logged_not_raised(self, caplog):
        adapter = StorageAdapter(ExplodingStorage())
        with caplog.at_level(logging.WARNING):
            adapter.set("k", "v")
        assert "disk full" in caplog.text

    def test_get_and_remove(self):
        adapter = StorageAdapter(MemoryStorage())
        assert adapter.get("missing") is None
        adapter.remove("missing")
        adapter.set("k", "v")
        assert adapter.get("k") == "v"
        adapter.remove("k")
        assert adapter.get("k") is None

    def test_failed_read_and_delete_are_logged_not_raised(self, caplog):
        adapter = StorageAdapter(UnreadableStorage())
        with caplog.at_level(logging.WARNING):
            assert adapter.get("k") is None
            adapter.remove("k")
        assert "Read failed for 'k'" in caplog.text
        assert "Delete failed for 'k'" in caplog.text
