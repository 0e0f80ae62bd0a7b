"""Database setup and the SQL-backed key-value store."""

from typing import Optional

from sqlalchemy import String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from host.storage import KeyValueStore


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class KeyValueEntry(Base):
    """One named string blob."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine for ``database_url``."""
    return create_engine(database_url, echo=echo, future=True)


def init_db(engine: Engine):
    """Initialize database tables."""
    Base.metadata.create_all(engine)


class SqlKeyValueStore(KeyValueStore):
    """Key-value store with one row per key.

    Each ``set`` is an upsert in its own transaction, so a failed write
    rolls back and leaves the previous value in place.

    Sessions are synchronous: every call blocks the event loop while it
    runs.  Callers issue one small single-row statement at a time.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session = sessionmaker(engine, expire_on_commit=False)

    def get(self, key: str) -> Optional[str]:
        with self._session() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session.begin() as session:
            session.merge(KeyValueEntry(key=key, value=value))
