"""
Spaces: containers for calendars, tasks, contacts and lists, shared by members.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Enum as SQLEnum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin, TenantScopedMixin
from .enums import SpaceRole, SpaceType

if TYPE_CHECKING:
    from .calendar import Calendar
    from .tenant import Tenant, User


class Space(TenantScopedMixin, EntityMixin, Base):
    """A named collection of organizer data within a tenant."""

    __tablename__ = "space"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    space_type: Mapped[SpaceType] = mapped_column(
        SQLEnum(SpaceType, name="space_type"), nullable=False, default=SpaceType.PERSONAL
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship(back_populates="spaces")
    memberships: Mapped[list["SpaceMembership"]] = relationship(back_populates="space")
    calendars: Mapped[list["Calendar"]] = relationship(back_populates="space")


class SpaceMembership(EntityMixin, Base):
    """A user's role in a space."""

    __tablename__ = "space_membership"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id"), nullable=False, index=True
    )
    role: Mapped[SpaceRole] = mapped_column(
        SQLEnum(SpaceRole, name="space_role"), nullable=False, default=SpaceRole.VIEWER
    )

    space: Mapped["Space"] = relationship(back_populates="memberships")
    user: Mapped["User"] = relationship(back_populates="space_memberships")

    __table_args__ = (
        UniqueConstraint("space_id", "user_id", name="uq_space_membership_space_user"),
    )
