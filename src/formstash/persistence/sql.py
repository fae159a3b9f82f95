"""
FormStash Persistence Layer - SQL Backend

Keeps field values in a single SQLModel table so drafts survive process
restarts and can be shared by several workers pointing at one database.
"""

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..exceptions import StorageError, StorageUnavailable
from .base import StorageBackend

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoredField(SQLModel, table=True):
    """One stored form field value."""
    __tablename__ = "formstash_field"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=utc_now)


class SQLStorage(StorageBackend):
    """
    SQLModel-backed storage.

    Args:
        database_url: SQLAlchemy URL; defaults to a private in-memory SQLite DB
        echo: Echo SQL statements (debugging)
    """

    def __init__(self, database_url: str = "sqlite://", echo: bool = False):
        self.database_url = database_url
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Every connection to an in-memory SQLite DB is a new database
            self.engine = create_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(database_url, echo=echo)
        try:
            SQLModel.metadata.create_all(self.engine, tables=[StoredField.__table__])
        except SQLAlchemyError as e:
            raise StorageUnavailable(f"Cannot prepare {self.engine.url}: {e}") from e
        logger.info(f"SQLStorage initialized: {self.engine.url}")

    def get(self, key: str) -> Optional[str]:
        try:
            with Session(self.engine) as session:
                row = session.get(StoredField, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with Session(self.engine) as session:
                row = session.get(StoredField, key)
                if row:
                    row.value = value
                    row.updated_at = utc_now()
                else:
                    row = StoredField(key=key, value=value)
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to store {key!r}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            with Session(self.engine) as session:
                row = session.get(StoredField, key)
                if row is None:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e

    def keys(self) -> Iterator[str]:
        try:
            with Session(self.engine) as session:
                return iter(list(session.exec(select(StoredField.key)).all()))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys: {e}") from e

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
