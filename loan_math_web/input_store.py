"""Key/value store for the last inputs a user submitted.

The web adapter remembers each form's last values so they can be pre-filled
on the next visit. The calculation core never touches this store; the app
receives one at creation time. ``SqlInputStore`` defaults to SQLite for local
development but accepts any SQLAlchemy-compatible URL. ``MemoryInputStore``
keeps values in a dict and suits tests and single-process runs.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

DEFAULT_URL = "sqlite:///loan_math_inputs.sqlite3"
MEMORY_URL = "memory://"


class SavedInputModel(Base):
    __tablename__ = "saved_inputs"

    key = Column(String(255), primary_key=True)
    payload_json = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class InputStore(ABC):
    """Get/set JSON-serialisable dicts by string key."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any]) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Forget ``key``; a missing key is not an error."""


class MemoryInputStore(InputStore):
    def __init__(self) -> None:
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._values.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self._values[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class SqlInputStore(InputStore):
    """Database-backed input store."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._session_factory() as session:
            row = session.get(SavedInputModel, key)
            return json.loads(row.payload_json) if row else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        payload = json.dumps(value)
        with self._session_factory() as session:
            row = session.get(SavedInputModel, key)
            if row:
                row.payload_json = payload
                row.updated_at = datetime.utcnow()
            else:
                session.add(SavedInputModel(key=key, payload_json=payload))
            session.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(SavedInputModel, key)
            if row:
                session.delete(row)
                session.commit()


def create_store_from_env(url: Optional[str]) -> InputStore:
    if url == MEMORY_URL:
        return MemoryInputStore()
    return SqlInputStore(url or DEFAULT_URL)
