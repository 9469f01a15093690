"""
Task models: Project, TaskItem, Category, TaskCategory.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Date,
    Enum as SQLEnum,
    ForeignKey,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin, OptionalTenantScopedMixin
from .enums import TaskItemPriority, TaskItemStatus
from .types import UTCDateTime


class Project(EntityMixin, Base):
    """Groups related tasks within a space."""

    __tablename__ = "project"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(2000))

    task_items: Mapped[list["TaskItem"]] = relationship(back_populates="project")


class TaskItem(EntityMixin, Base):
    """A to-do item, optionally within a project."""

    __tablename__ = "task_item"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("project.id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(4000))
    status: Mapped[TaskItemStatus] = mapped_column(
        SQLEnum(TaskItemStatus, name="task_item_status"),
        nullable=False,
        default=TaskItemStatus.OPEN,
    )
    priority: Mapped[TaskItemPriority] = mapped_column(
        SQLEnum(TaskItemPriority, name="task_item_priority"),
        nullable=False,
        default=TaskItemPriority.NONE,
    )
    due_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())
    due_date: Mapped[Optional[date]] = mapped_column(Date)
    recurrence_rule: Mapped[Optional[str]] = mapped_column(String(1024))
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())

    project: Mapped[Optional["Project"]] = relationship(back_populates="task_items")
    task_categories: Mapped[list["TaskCategory"]] = relationship(back_populates="task_item")


class Category(OptionalTenantScopedMixin, EntityMixin, Base):
    """
    Task label.
    Rows with no tenant are system-defined and shared by all tenants.
    """

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[str] = mapped_column(String(16), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(64))

    task_categories: Mapped[list["TaskCategory"]] = relationship(back_populates="category")


class TaskCategory(EntityMixin, Base):
    """Assignment of a category to a task."""

    __tablename__ = "task_category"

    task_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("task_item.id"), nullable=False, index=True
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("category.id"), nullable=False, index=True
    )

    task_item: Mapped["TaskItem"] = relationship(back_populates="task_categories")
    category: Mapped["Category"] = relationship(back_populates="task_categories")

    __table_args__ = (
        UniqueConstraint("task_item_id", "category_id", name="uq_task_category_item_category"),
    )
