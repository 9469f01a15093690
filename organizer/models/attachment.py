"""
File attachment metadata. The file content lives in external storage.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, EntityMixin, TenantScopedMixin


class Attachment(TenantScopedMixin, EntityMixin, Base):
    """
    A file attached to an event, a task or a person.
    At most one of the owner references is expected to be set.
    """

    __tablename__ = "attachment"

    calendar_event_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("calendar_event.id"), nullable=True, index=True
    )
    task_item_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("task_item.id"), nullable=True, index=True
    )
    person_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("person.id"), nullable=True, index=True
    )
    file_name: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str] = mapped_column(String(256), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)
