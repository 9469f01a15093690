"""
Mutation interceptor chain.

Runs inside ``before_flush`` of every pipeline session, against a snapshot of
the pending changes taken once before any interceptor runs:

1. AuditFieldsInterceptor stamps ``id``/``created_at``/``updated_at``.
2. ChangeLogInterceptor appends one ChangeLog row per tracked change to the
   same session, so the ledger commits or rolls back with the data.

The chain order is fixed: the ledger records the timestamps and the final
``deleted_at`` state produced by the audit pass.

"Now" is read from the clock once per transaction and cached in
``Session.info`` until the transaction ends, so every entity and ledger row
touched by one transaction shares a timestamp.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from operator import attrgetter
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Protocol, Sequence

from sqlalchemy import inspect
from sqlalchemy.orm import Session, SessionTransaction

from organizer.models import (
    Calendar,
    ChangeLog,
    ChangeOperation,
    EntityMixin,
    Person,
    Project,
    ShoppingList,
    Space,
    SpaceMembership,
    TaskItem,
    Tenant,
    TenantScope,
    scope_of,
)
from organizer.persistence.change_types import try_get_entity_type
from organizer.persistence.scope import session_tenant_id
from organizer.services import Clock
from shared.config.logging import get_logger

logger = get_logger(__name__)

# Session.info key for the transaction's cached "now"
NOW_KEY = "organizer.now"


# =============================================================================
# Pending change snapshot
# =============================================================================


class EntityState(enum.Enum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class TrackedChange:
    entity: Any
    state: EntityState


@dataclass(frozen=True)
class ChangeSnapshot:
    """Pending changes of one flush, in added/modified/removed order."""

    changes: tuple[TrackedChange, ...]

    @classmethod
    def capture(cls, session: Session) -> ChangeSnapshot:
        changes = [TrackedChange(obj, EntityState.ADDED) for obj in session.new]
        # session.dirty is optimistic: it includes objects with no net change.
        # Collection changes belong to the child row, not the parent.
        changes.extend(
            TrackedChange(obj, EntityState.MODIFIED)
            for obj in session.dirty
            if session.is_modified(obj, include_collections=False)
        )
        changes.extend(TrackedChange(obj, EntityState.REMOVED) for obj in session.deleted)
        return cls(tuple(changes))

    def __iter__(self) -> Iterator[TrackedChange]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)


@dataclass(frozen=True)
class InterceptorContext:
    session: Session
    snapshot: ChangeSnapshot
    now: datetime
    caller_tenant_id: uuid.UUID | None


class MutationInterceptor(Protocol):
    def before_flush(self, context: InterceptorContext) -> None:
        ...


# =============================================================================
# Audit stamping
# =============================================================================


class AuditFieldsInterceptor:
    """
    Stamps audit fields on entities.

    - ADDED: assigns ``id`` when absent, sets ``created_at = updated_at = now``
    - MODIFIED: sets ``updated_at = now``
    - REMOVED, and anything that is not an entity: untouched
    """

    def before_flush(self, context: InterceptorContext) -> None:
        for change in context.snapshot:
            entity = change.entity
            if not isinstance(entity, EntityMixin):
                continue

            if change.state is EntityState.ADDED:
                # Column defaults fire after before_flush; the ledger needs the id now
                if entity.id is None:
                    entity.id = uuid.uuid4()
                entity.created_at = context.now
                entity.updated_at = context.now
            elif change.state is EntityState.MODIFIED:
                entity.updated_at = context.now


# =============================================================================
# Change-log emission
# =============================================================================


# Kinds that are a space or hold a direct reference to one
SPACE_ID_RESOLVERS: Mapping[type, Callable[[Any], uuid.UUID | None]] = MappingProxyType({
    Space: attrgetter("id"),
    SpaceMembership: attrgetter("space_id"),
    Calendar: attrgetter("space_id"),
    Person: attrgetter("space_id"),
    Project: attrgetter("space_id"),
    TaskItem: attrgetter("space_id"),
    ShoppingList: attrgetter("space_id"),
})


def is_soft_delete(entity: Any) -> bool:
    """True when ``deleted_at`` changed in this flush and is now set."""
    if entity.deleted_at is None:
        return False
    return inspect(entity).attrs.deleted_at.history.has_changes()


def classify_operation(change: TrackedChange) -> ChangeOperation:
    if change.state is EntityState.ADDED:
        return ChangeOperation.CREATED
    if change.state is EntityState.REMOVED:
        return ChangeOperation.DELETED
    if isinstance(change.entity, EntityMixin) and is_soft_delete(change.entity):
        return ChangeOperation.DELETED
    return ChangeOperation.UPDATED


def resolve_tenant_id(entity: Any, caller_tenant_id: uuid.UUID | None) -> uuid.UUID | None:
    if scope_of(type(entity)) is not TenantScope.UNSCOPED:
        return entity.tenant_id
    if isinstance(entity, Tenant):
        return entity.id
    return caller_tenant_id


def resolve_space_id(entity: Any) -> uuid.UUID | None:
    resolver = SPACE_ID_RESOLVERS.get(type(entity))
    if resolver is None:
        return None
    return resolver(entity)


class ChangeLogInterceptor:
    """
    Appends one ChangeLog row per tracked change of a registered kind.

    Soft deletes (``deleted_at`` going from null to set) are logged as
    DELETED, not UPDATED. Unregistered kinds, ChangeLog included, are skipped.
    """

    def before_flush(self, context: InterceptorContext) -> None:
        entries = []
        for change in context.snapshot:
            entity_type = try_get_entity_type(type(change.entity))
            if entity_type is None:
                continue

            entries.append(
                ChangeLog(
                    entity_type=entity_type,
                    entity_id=change.entity.id,
                    operation=classify_operation(change),
                    tenant_id=resolve_tenant_id(change.entity, context.caller_tenant_id),
                    space_id=resolve_space_id(change.entity),
                    timestamp=context.now,
                )
            )

        if entries:
            context.session.add_all(entries)
            logger.debug("Change log entries emitted", count=len(entries))


DEFAULT_INTERCEPTORS: tuple[MutationInterceptor, ...] = (
    AuditFieldsInterceptor(),
    ChangeLogInterceptor(),
)


# =============================================================================
# Pipeline
# =============================================================================


class MutationPipeline:
    """
    Runs the interceptor chain for one session factory.

    Install with organizer.persistence.session.install_pipeline().
    """

    def __init__(
        self,
        clock: Clock,
        interceptors: Sequence[MutationInterceptor] = DEFAULT_INTERCEPTORS,
    ):
        self.clock = clock
        self.interceptors: tuple[MutationInterceptor, ...] = tuple(interceptors)

    def now(self, session: Session) -> datetime:
        """The transaction's timestamp, read from the clock on first use."""
        now = session.info.get(NOW_KEY)
        if now is None:
            now = self.clock.now()
            session.info[NOW_KEY] = now
        return now

    def before_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        snapshot = ChangeSnapshot.capture(session)
        if not snapshot:
            return

        context = InterceptorContext(
            session=session,
            snapshot=snapshot,
            now=self.now(session),
            caller_tenant_id=session_tenant_id(session),
        )
        for interceptor in self.interceptors:
            interceptor.before_flush(context)

    def end_transaction(self, session: Session, transaction: SessionTransaction) -> None:
        """
        Forget the cached timestamp when the outermost transaction ends.

        Fires on commit, rollback and close alike; savepoints keep it.
        """
        if transaction.parent is None:
            session.info.pop(NOW_KEY, None)
