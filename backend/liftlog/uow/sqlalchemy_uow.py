"""
SQLAlchemy units of work over the Flask-scoped session.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from liftlog.core.extensions import db
from liftlog.repositories import (
    ExerciseRepository,
    WorkoutExerciseRepository,
    WorkoutRepository,
    WorkoutSetRepository,
)
from liftlog.uow.base import UnitOfWork

logger = logging.getLogger(__name__)

# Dialects that understand ``SET TRANSACTION`` directives
_SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

_ISOLATION_LEVELS = ("READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "READ UNCOMMITTED")

# First keyword of statements a read-only scope refuses to send
_WRITE_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "replace",
    "merge",
    "create",
    "alter",
    "drop",
    "truncate",
)


class SQLAlchemyRepositoryContainer:
    """The four workout-log repositories sharing one session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.exercises = ExerciseRepository(session=session)
        self.workouts = WorkoutRepository(session=session)
        self.workout_exercises = WorkoutExerciseRepository(session=session)
        self.sets = WorkoutSetRepository(session=session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write scope: commit when the block succeeds, roll back when it raises.

    The session starts its transaction lazily on the first statement.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read scope for queries: nothing it runs can change stored workouts.

    Flushes of pending objects and DML/DDL statements raise ``RuntimeError``
    while the scope is open, and it always rolls back on exit. On PostgreSQL
    and MySQL/MariaDB it additionally issues ``SET TRANSACTION`` for the
    isolation level and ``READ ONLY`` when it owns the transaction.

    :param isolation_level: Isolation level name, or ``None`` for the default.
    :type isolation_level: str | None
    :param enforce_db_readonly: Issue ``SET TRANSACTION READ ONLY``.
    :type enforce_db_readonly: bool
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn: SessionTransaction | None = None
        self._guarded = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn = None
        try:
            self._txn = self.session.begin()
        except InvalidRequestError:
            # A transaction is already running; read inside it.
            pass

        self._conn = self.session.connection()
        self._install_guards()
        if self._txn is not None and self._conn.dialect.name in _SET_TRANSACTION_DIALECTS:
            self._apply_directives()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                self._txn = None
        finally:
            self._remove_guards()
            self._conn = None

    def commit(self) -> None:
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _apply_directives(self) -> None:
        statements = []
        if self.isolation_level:
            level = self.isolation_level.strip().upper()
            if level not in _ISOLATION_LEVELS:
                logger.warning("Unknown isolation level %r; sending it as-is", level)
            statements.append(f"SET TRANSACTION ISOLATION LEVEL {level}")
        if self.enforce_db_readonly:
            statements.append("SET TRANSACTION READ ONLY")
        try:
            for stmt in statements:
                self.session.execute(text(stmt))
        except SQLAlchemyError as exc:
            logger.warning("SET TRANSACTION failed, relying on guards only: %s", exc)

    def _block_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

    def _block_writes(self, conn, cursor, statement, parameters, context, executemany) -> None:
        keyword = statement.lstrip().split(None, 1)[0].lower() if statement else ""
        if keyword in _WRITE_KEYWORDS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

    def _install_guards(self) -> None:
        if self._guarded:
            return
        event.listen(self.session, "before_flush", self._block_flush)
        event.listen(self._conn, "before_cursor_execute", self._block_writes)
        self._guarded = True

    def _remove_guards(self) -> None:
        if not self._guarded:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._block_flush)
        with suppress(InvalidRequestError):
            event.remove(self._conn, "before_cursor_execute", self._block_writes)
        self._guarded = False
