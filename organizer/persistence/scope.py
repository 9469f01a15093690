"""
Query scope compiler.

Every ORM SELECT issued by a pipeline session is filtered by two rules:
- soft delete: rows with ``deleted_at`` set are invisible
- tenant visibility, derived from the model's scope capability:
    tenant-required  -> tenant_id = :caller_tenant
    tenant-optional  -> tenant_id = :caller_tenant OR tenant_id IS NULL
    unscoped         -> no tenant clause

When the caller has no resolvable tenant the tenant clause is omitted and all
tenants are visible. This is the unauthenticated/administrative default, not
an error.

A single statement can opt out of both rules with ``unscoped(stmt)`` (the
``bypass_scope`` execution option). Only maintenance code and tests should
do this.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria
from sqlalchemy.sql import ColumnElement

from organizer.models import (
    EntityMixin,
    OptionalTenantScopedMixin,
    TenantScope,
    TenantScopedMixin,
    scope_of,
)
from shared.config.logging import get_logger

logger = get_logger(__name__)

# Execution option disabling both predicates for one statement
BYPASS_SCOPE = "bypass_scope"

# Session.info key holding the session's TenantContext
TENANT_CONTEXT_KEY = "organizer.tenant_context"


# =============================================================================
# Pure predicate derivation
# =============================================================================


def soft_delete_predicate(model: type) -> ColumnElement[bool] | None:
    """``deleted_at IS NULL`` for entity models, None for anything else."""
    if not issubclass(model, EntityMixin):
        return None
    return model.deleted_at.is_(None)


def tenant_predicate(model: type, tenant_id: uuid.UUID | None) -> ColumnElement[bool] | None:
    """Tenant visibility clause for a model, None when nothing applies."""
    if tenant_id is None:
        return None

    scope = scope_of(model)
    if scope is TenantScope.REQUIRED:
        return model.tenant_id == tenant_id
    if scope is TenantScope.OPTIONAL:
        return or_(model.tenant_id == tenant_id, model.tenant_id.is_(None))
    return None


def scope_predicate(model: type, tenant_id: uuid.UUID | None) -> ColumnElement[bool] | None:
    """Combined soft delete and tenant visibility predicate for a model."""
    clauses = [
        clause
        for clause in (soft_delete_predicate(model), tenant_predicate(model, tenant_id))
        if clause is not None
    ]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return and_(*clauses)


# =============================================================================
# Statement-wide application
# =============================================================================


def scope_options(tenant_id: uuid.UUID | None) -> list[Any]:
    """
    Loader criteria applying the scope rules to every entity in a statement,
    including joins, aliases and the relationship loads it triggers.

    The lambdas are cached by SQLAlchemy; ``tenant_id`` is picked up from the
    closure as a bound parameter.
    """
    options = [
        with_loader_criteria(
            EntityMixin, lambda cls: cls.deleted_at.is_(None), include_aliases=True
        )
    ]
    if tenant_id is not None:
        options.append(
            with_loader_criteria(
                TenantScopedMixin,
                lambda cls: cls.tenant_id == tenant_id,
                include_aliases=True,
            )
        )
        options.append(
            with_loader_criteria(
                OptionalTenantScopedMixin,
                lambda cls: or_(cls.tenant_id == tenant_id, cls.tenant_id.is_(None)),
                include_aliases=True,
            )
        )
    return options


def session_tenant_id(session: Session) -> uuid.UUID | None:
    """Caller tenant for a pipeline session, resolved at call time."""
    tenant_context = session.info.get(TENANT_CONTEXT_KEY)
    if tenant_context is None:
        return None
    return tenant_context.current_tenant_id


def apply_query_scope(execute_state: ORMExecuteState) -> None:
    """
    ``do_orm_execute`` hook adding the scope criteria to ORM SELECTs.

    Column loads (refresh of expired attributes) are left alone so an entity
    already in the session can always be refreshed.
    """
    if not execute_state.is_select or execute_state.is_column_load:
        return

    if execute_state.execution_options.get(BYPASS_SCOPE, False):
        logger.debug("Query scope bypassed for statement")
        return

    tenant_id = session_tenant_id(execute_state.session)
    execute_state.statement = execute_state.statement.options(*scope_options(tenant_id))


def unscoped(statement):
    """Mark a statement to run without soft delete or tenant filtering."""
    return statement.execution_options(**{BYPASS_SCOPE: True})
