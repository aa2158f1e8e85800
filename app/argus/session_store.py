"""Server-side session storage on the relational store.

One row per session id in the ``sessions`` table: ``{id, expires, data}``.
``expires`` is an absolute Unix timestamp in seconds and ``data`` is the whole
session mapping serialized with Flask's tagged JSON (the same format Flask
uses for cookie sessions, so bytes/datetime/tuple values survive).

Reads filter on ``expires > now``; expired rows are never swept, so the table
grows with the number of distinct sessions ever created.
"""
from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any

from flask.json.tag import TaggedJSONSerializer
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.argus.models import SessionRecord

DEFAULT_TTL = timedelta(days=7)


class SessionStoreError(RuntimeError):
    """The underlying storage failed to execute a session read or write."""


class CorruptSessionError(SessionStoreError):
    """A stored payload exists but cannot be deserialized."""


class SessionStore:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        default_ttl: timedelta = DEFAULT_TTL,
        serializer: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session_factory = session_factory
        self.default_ttl = default_ttl
        self.serializer = serializer or TaggedJSONSerializer()
        self.clock = clock

    def _now(self) -> int:
        return int(self.clock())

    def _expires_at(self, expires: datetime | None) -> int:
        if expires is not None:
            return int(expires.timestamp())
        return self._now() + int(self.default_ttl.total_seconds())

    def _dumps(self, data: Mapping[str, Any]) -> str:
        return self.serializer.dumps(dict(data))

    def _loads(self, sid: str, raw: str) -> dict[str, Any]:
        try:
            value = self.serializer.loads(raw)
        except (ValueError, TypeError, KeyError) as e:
            raise CorruptSessionError(f"Session {sid!r} has an unreadable payload") from e
        if not isinstance(value, dict):
            raise CorruptSessionError(f"Session {sid!r} payload is {type(value).__name__}, expected a mapping")
        return value

    def get(self, sid: str) -> dict[str, Any] | None:
        """Return the live payload for `sid`, or None if absent or expired."""
        try:
            with self.session_factory() as s:
                row = s.execute(
                    select(SessionRecord.data).where(
                        SessionRecord.id == sid,
                        SessionRecord.expires > self._now(),
                    )
                ).first()
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Failed to read session {sid!r}") from e
        if row is None:
            return None
        return self._loads(sid, row.data)

    def set(self, sid: str, data: Mapping[str, Any], expires: datetime | None = None) -> None:
        """
        Insert or fully replace the row for `sid`.

        `expires` is the session cookie's expiration; without one the row lives
        for `default_ttl`.
        """
        values = {"id": sid, "expires": self._expires_at(expires), "data": self._dumps(data)}
        try:
            with self.session_factory() as s, s.begin():
                s.execute(_upsert(s, values))
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Failed to write session {sid!r}") from e

    def destroy(self, sid: str) -> None:
        try:
            with self.session_factory() as s, s.begin():
                s.execute(delete(SessionRecord).where(SessionRecord.id == sid))
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Failed to delete session {sid!r}") from e

    def touch(self, sid: str, data: Mapping[str, Any], expires: datetime | None = None) -> bool:
        """
        Refresh expiry and data of a live session. Returns False (and writes
        nothing) when `sid` has no live row, so a destroyed or expired session
        is never recreated.
        """
        values = {"expires": self._expires_at(expires), "data": self._dumps(data)}
        try:
            with self.session_factory() as s, s.begin():
                result = s.execute(
                    update(SessionRecord)
                    .where(SessionRecord.id == sid, SessionRecord.expires > self._now())
                    .values(**values)
                )
        except SQLAlchemyError as e:
            raise SessionStoreError(f"Failed to refresh session {sid!r}") from e
        return result.rowcount > 0


def _upsert(s: Session, values: dict[str, Any]):
    dialect = s.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise SessionStoreError(f"Session upsert is not supported on {dialect!r}")
    stmt = insert(SessionRecord).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=[SessionRecord.id],
        set_={"expires": stmt.excluded.expires, "data": stmt.excluded.data},
    )
