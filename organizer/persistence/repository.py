"""
Generic repository over pipeline sessions.

Reads rely on the session's query scope hook: soft-deleted rows and rows of
other tenants are never returned, and the caller cannot tell which of the two
(or a missing row) caused a miss. Writes commit through the interceptor
chain, so audit fields and change-log rows are written atomically with the
data.

Usage:
    from organizer.persistence.repository import Repository

    repo = Repository(Space, session)

    space = repo.create(Space(tenant_id=tenant.id, name="Home", ...))
    spaces = repo.list(order_by=Space.name)
    repo.soft_delete(space.id)

    # Administrative recovery
    repo.get_including_deleted(space.id)
"""

from __future__ import annotations

import uuid
from typing import Any, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.sql import Select

from organizer.models import EntityMixin
from organizer.persistence.scope import session_tenant_id, tenant_predicate, unscoped
from organizer.persistence.session import commit, unit_of_work_now
from shared.config.logging import get_logger
from shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=EntityMixin)


class Repository(Generic[ModelT]):
    """
    CRUD facade for one entity model.

    The session must come from a pipeline-enabled factory
    (organizer.persistence.session.create_session_factory).
    """

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    def _base_query(self) -> Select:
        """Select of the model; scope criteria are added at execution."""
        return select(self._model)

    def _count(self, query: Select) -> int:
        # Counting over a subquery keeps the entity visible to the scope hook
        count_query = select(func.count()).select_from(query.subquery())
        return self._session.scalar(count_query) or 0

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, entity_id: uuid.UUID) -> ModelT | None:
        """
        Find a visible entity by ID.

        Always issues a SELECT so that an instance already in the identity
        map is still checked against the scope rules.

        Returns:
            Entity, or None when it is deleted, out of scope or nonexistent.
        """
        query = self._base_query().where(self._model.id == entity_id)
        return self._session.scalar(query)

    def get_or_raise(self, entity_id: uuid.UUID) -> ModelT:
        """
        Find a visible entity by ID.

        Raises:
            NotFoundError: If it is deleted, out of scope or nonexistent.
        """
        entity = self.get(entity_id)
        if entity is None:
            raise NotFoundError(self._model.__name__, entity_id)
        return entity

    def list(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelT]:
        """
        All visible entities.

        Order is unspecified unless ``order_by`` is given.
        """
        query = self._base_query()
        if order_by is not None:
            query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return self._session.scalars(query).all()

    def find_by_ids(self, entity_ids: Iterable[uuid.UUID]) -> Sequence[ModelT]:
        """Visible entities among the given IDs. Missing ones are skipped."""
        ids = list(entity_ids)
        if not ids:
            return []
        query = self._base_query().where(self._model.id.in_(ids))
        return self._session.scalars(query).all()

    def count(self) -> int:
        """Count visible entities."""
        return self._count(self._base_query())

    def exists(self, entity_id: uuid.UUID) -> bool:
        """Check if a visible entity has this ID."""
        return self._count(self._base_query().where(self._model.id == entity_id)) > 0

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, entity: ModelT) -> ModelT:
        """
        Insert an entity and commit.

        Returns:
            The same instance with ``id``, ``created_at`` and ``updated_at`` set.

        Raises:
            CommitError: If the unit of work could not be committed.
        """
        if entity.id is None:
            entity.id = uuid.uuid4()
        self._session.add(entity)
        commit(self._session, f"create {self._model.__name__}")
        return entity

    def update(self, entity: ModelT) -> ModelT:
        """
        Mark an entity modified and commit, even when no column changed.

        A detached instance is merged into the session first; the session's
        instance is returned.

        Raises:
            NotFoundError: If the entity was never persisted, or is no longer
                visible (deleted or out of scope).
            CommitError: If the unit of work could not be committed.
        """
        state = inspect(entity)
        if state.transient or state.pending or self.get(entity.id) is None:
            raise NotFoundError(self._model.__name__, entity.id)

        if state.detached:
            entity = self._session.merge(entity)

        flag_modified(entity, "updated_at")
        commit(self._session, f"update {self._model.__name__}")
        return entity

    def soft_delete(self, entity_id: uuid.UUID) -> bool:
        """
        Soft delete a visible entity and commit.

        ``deleted_at`` is set to the transaction's timestamp. An entity that is
        already deleted is not visible, so a second call returns False.

        Returns:
            True if an entity was found and deleted, False otherwise.

        Raises:
            CommitError: If the unit of work could not be committed.
        """
        entity = self.get(entity_id)
        if entity is None:
            return False

        entity.deleted_at = unit_of_work_now(self._session)
        commit(self._session, f"soft delete {self._model.__name__}")
        logger.debug("Entity soft-deleted", entity=self._model.__name__, entity_id=entity_id)
        return True

    # =========================================================================
    # Administrative recovery (scope bypass)
    # =========================================================================

    def get_including_deleted(self, entity_id: uuid.UUID) -> ModelT | None:
        """Find an entity by ID ignoring soft delete and tenant scope."""
        query = unscoped(self._base_query().where(self._model.id == entity_id))
        return self._session.scalar(query)

    def list_deleted(self) -> Sequence[ModelT]:
        """
        Soft-deleted entities of the caller's tenant.

        Only tenant visibility is re-applied; with no caller tenant every
        deleted row is returned.
        """
        query = self._base_query().where(self._model.deleted_at.is_not(None))
        visibility = tenant_predicate(self._model, session_tenant_id(self._session))
        if visibility is not None:
            query = query.where(visibility)
        return self._session.scalars(unscoped(query)).all()
