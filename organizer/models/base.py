"""
Base class, entity shape and tenant scope capabilities for all ORM models.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from .types import UTCDateTime


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TenantScope(enum.Enum):
    """Tenant dimension of an entity kind."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    UNSCOPED = "unscoped"


class EntityMixin:
    """
    Identity, audit timestamps and soft delete for every persisted entity.

    Fields added:
    - id: UUID assigned at creation, never changed
    - created_at, updated_at: stamped by the mutation pipeline at flush time
    - deleted_at: soft delete marker, once set it is never cleared

    ``is_deleted`` is derived from ``deleted_at`` and never stored.
    """

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime(), nullable=True, index=True
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @validates("deleted_at")
    def _validate_deleted_at(self, key: str, value: datetime | None) -> datetime | None:
        if value is None and self.deleted_at is not None:
            raise ValueError(
                f"{type(self).__name__} {self.id} is soft-deleted; deleted_at cannot be cleared"
            )
        return value

    def __repr__(self) -> str:
        state = "deleted" if self.is_deleted else "active"
        return f"<{type(self).__name__}(id={self.id}, {state})>"


class _TenantDimension:
    """
    Rejects classes that declare more than one tenant scope.

    Runs before declarative mapping, so a conflicting model never gets a table.
    """

    def __init_subclass__(cls, **kwargs) -> None:
        declared = {
            klass.__dict__["__tenant_scope__"]
            for klass in cls.__mro__
            if "__tenant_scope__" in klass.__dict__
        }
        if len(declared) > 1:
            names = ", ".join(sorted(scope.value for scope in declared))
            raise TypeError(
                f"{cls.__name__} mixes incompatible tenant scopes ({names}); "
                "an entity is tenant-required, tenant-optional or unscoped"
            )
        super().__init_subclass__(**kwargs)


class TenantScopedMixin(_TenantDimension):
    """Entity that always belongs to exactly one tenant."""

    __tenant_scope__ = TenantScope.REQUIRED

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tenant.id"), nullable=False, index=True
    )


class OptionalTenantScopedMixin(_TenantDimension):
    """
    Entity whose tenant is optional.

    A null tenant_id marks system reference data visible to every tenant.
    """

    __tenant_scope__ = TenantScope.OPTIONAL

    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tenant.id"), nullable=True, index=True
    )


def scope_of(model: type) -> TenantScope:
    """Return the tenant scope capability of a model class."""
    return getattr(model, "__tenant_scope__", TenantScope.UNSCOPED)
