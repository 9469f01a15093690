"""
Multi-tenancy models: Tenant, User, Device.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Enum as SQLEnum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin, TenantScopedMixin
from .enums import DevicePlatform, WeekStart
from .types import UTCDateTime

if TYPE_CHECKING:
    from .space import Space, SpaceMembership


class Tenant(EntityMixin, Base):
    """
    Top-level isolation boundary.
    Not tenant-scoped itself: the tenant row is the scope.
    """

    __tablename__ = "tenant"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)

    # Relationships
    users: Mapped[list["User"]] = relationship(back_populates="tenant")
    spaces: Mapped[list["Space"]] = relationship(back_populates="tenant")

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug='{self.slug}')>"


class User(TenantScopedMixin, EntityMixin, Base):
    """An account within a tenant."""

    __tablename__ = "app_user"

    display_name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    week_start: Mapped[WeekStart] = mapped_column(
        SQLEnum(WeekStart, name="week_start"), nullable=False, default=WeekStart.MONDAY
    )
    locale: Mapped[Optional[str]] = mapped_column(String(16))

    # Relationships
    tenant: Mapped["Tenant"] = relationship(back_populates="users")
    space_memberships: Mapped[list["SpaceMembership"]] = relationship(back_populates="user")
    devices: Mapped[list["Device"]] = relationship(back_populates="user")


class Device(TenantScopedMixin, EntityMixin, Base):
    """A push-notification target registered by a user."""

    __tablename__ = "device"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_user.id"), nullable=False, index=True
    )
    device_name: Mapped[str] = mapped_column(String(256), nullable=False)
    platform: Mapped[DevicePlatform] = mapped_column(
        SQLEnum(DevicePlatform, name="device_platform"), nullable=False
    )
    fcm_token: Mapped[str] = mapped_column(String(4096), nullable=False, unique=True)
    last_sync_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())

    user: Mapped["User"] = relationship(back_populates="devices")
