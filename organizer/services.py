"""
Collaborators consumed by the persistence pipeline.

- Clock: source of the current instant. Injected so every row touched by one
  transaction shares a timestamp and tests stay deterministic.
- TenantContext: the caller's resolved tenant, or None when there is none
  (unauthenticated or administrative access).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from shared.infrastructure.context import get_current_tenant_id


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware UTC datetime."""
        ...


@runtime_checkable
class TenantContext(Protocol):
    @property
    def current_tenant_id(self) -> uuid.UUID | None:
        """The caller's tenant, or None when it cannot be resolved."""
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class NullTenantContext:
    """No caller tenant. Used by background jobs and administrative tooling."""

    @property
    def current_tenant_id(self) -> uuid.UUID | None:
        return None


class StaticTenantContext:
    """A fixed caller tenant."""

    def __init__(self, tenant_id: uuid.UUID | None):
        self._tenant_id = tenant_id

    @property
    def current_tenant_id(self) -> uuid.UUID | None:
        return self._tenant_id

    def __repr__(self) -> str:
        return f"<StaticTenantContext(tenant_id={self._tenant_id})>"


class ContextVarTenantContext:
    """
    Reads the tenant bound with shared.infrastructure.context.tenant_scope().

    Each request, task or thread sees its own value.
    """

    @property
    def current_tenant_id(self) -> uuid.UUID | None:
        return get_current_tenant_id()
