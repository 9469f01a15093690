"""
Change ledger model.

Rows are appended in the same transaction as the mutation they describe and
are never updated or deleted. ChangeLog is not an entity: it has no audit
fields and no soft delete, and it is absent from the change-type registry,
so its own inserts are never logged.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Enum as SQLEnum, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from .enums import ChangeLogEntityType, ChangeOperation
from .types import UTCDateTime


class ChangeLog(Base):
    """
    One Created/Updated/Deleted mutation of one entity.

    ``id`` is auto-incremented and serves as a monotonic cursor for sync
    consumers. Every row written by one commit shares ``timestamp``.
    """

    __tablename__ = "change_log"

    # SQLite only auto-increments INTEGER PRIMARY KEY
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    entity_type: Mapped[ChangeLogEntityType] = mapped_column(
        SQLEnum(ChangeLogEntityType, name="change_log_entity_type"), nullable=False
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    operation: Mapped[ChangeOperation] = mapped_column(
        SQLEnum(ChangeOperation, name="change_operation"), nullable=False
    )
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    space_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    __table_args__ = (
        Index("ix_change_log_tenant_id_id", "tenant_id", "id"),
        Index("ix_change_log_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ChangeLog(id={self.id}, {self.entity_type.name} {self.entity_id} "
            f"{self.operation.name})>"
        )
