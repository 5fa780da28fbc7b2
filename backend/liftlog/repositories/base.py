"""Shared repository base and ordering helpers.

Repositories translate workout-log lookups into SQLAlchemy statements on the
session handed to them by a unit of work. They flush so generated keys are
visible, but commit and rollback belong to the unit of work.

Every repository declares three whitelists:

* ``_sortable_fields``: public sort keys (``"-started_at"`` sorts descending).
* ``_filterable_fields``: keys accepted as equality filters by :meth:`list`.
* ``_updatable_fields``: keys a caller may assign, so ``user_id`` or a parent
  foreign key can never be rewritten through an update payload.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from liftlog.core.extensions import db

E = TypeVar("E")  # mapped entity type


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Split tokens such as ``["-started_at", "name"]`` into ``(field, is_desc)``.

    Blank tokens are dropped.
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Order ``stmt`` by the whitelisted ``tokens``, then by primary key.

    Unknown keys are skipped. The trailing primary-key order keeps listings
    stable when, for example, two workouts share a ``started_at``.

    :param sortable_fields: Public key to column mapping.
    :type sortable_fields: Mapping[str, InstrumentedAttribute]
    :param pk_attr: Tiebreaker column, or ``None`` for no tiebreaker.
    :type pk_attr: InstrumentedAttribute | None
    :rtype: :class:`sqlalchemy.sql.Select`
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Persistence helpers for one mapped model.

    Subclasses set ``model`` and override the whitelist hooks they need.
    Ownership checks live in the services; a repository answers exactly the
    predicate it is given.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """The unit-of-work session, or the Flask-scoped one when none was given."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """AND together ``column == value`` for every whitelisted key in ``filters``."""
        if not filters:
            return stmt

        allowed = self._filterable_fields()
        clauses = [
            allowed[k] == v
            for k, v in filters.items()
            if isinstance(allowed.get(k), InstrumentedAttribute)
        ]
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Keep only ``_updatable_fields`` keys of ``fields``.

        :param strict: Raise instead of dropping keys outside the whitelist.
        :type strict: bool
        :raises ValueError: If ``strict`` and a key is not updatable.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Fetch by primary key; ``None`` when absent."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__} has no primary-key attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Delete ``instance`` and flush; database cascades remove its children."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted ``fields`` onto a loaded ``instance``.

        :raises ValueError: If ``strict`` and a key is not updatable.
        """
        for k, v in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
    ) -> list[E]:
        """Return rows matching ``filters`` ordered by ``sort`` plus the primary key."""
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        return list(self.session.execute(stmt).scalars().all())
