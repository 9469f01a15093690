"""
Calendar models: Calendar, CalendarEvent, EventType, EventReminder, RecurrenceException.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin, OptionalTenantScopedMixin
from .enums import ReminderMethod
from .types import UTCDateTime

if TYPE_CHECKING:
    from .space import Space


class Calendar(EntityMixin, Base):
    """A calendar inside a space."""

    __tablename__ = "calendar"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), nullable=False)
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#3b82f6")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    space: Mapped["Space"] = relationship(back_populates="calendars")
    events: Mapped[list["CalendarEvent"]] = relationship(back_populates="calendar")


class EventType(OptionalTenantScopedMixin, EntityMixin, Base):
    """
    Category for calendar events and important dates.
    Rows with no tenant are system-defined and shared by all tenants.
    """

    __tablename__ = "event_type"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[str] = mapped_column(String(16), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(64))

    events: Mapped[list["CalendarEvent"]] = relationship(back_populates="event_type")


class CalendarEvent(EntityMixin, Base):
    """An event, possibly recurring, on a calendar."""

    __tablename__ = "calendar_event"

    calendar_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("calendar.id"), nullable=False, index=True
    )
    event_type_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("event_type.id"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_all_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    end_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    # All-day events carry calendar dates alongside the instants
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    recurrence_rule: Mapped[Optional[str]] = mapped_column(String(512))  # RFC 5545 RRULE
    location: Mapped[Optional[str]] = mapped_column(String(512))

    calendar: Mapped["Calendar"] = relationship(back_populates="events")
    event_type: Mapped[Optional["EventType"]] = relationship(back_populates="events")
    reminders: Mapped[list["EventReminder"]] = relationship(back_populates="calendar_event")
    exceptions: Mapped[list["RecurrenceException"]] = relationship(
        back_populates="calendar_event"
    )


class EventReminder(EntityMixin, Base):
    __tablename__ = "event_reminder"

    calendar_event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("calendar_event.id"), nullable=False, index=True
    )
    minutes_before: Mapped[int] = mapped_column(Integer, nullable=False)
    method: Mapped[ReminderMethod] = mapped_column(
        SQLEnum(ReminderMethod, name="reminder_method"), nullable=False
    )

    calendar_event: Mapped["CalendarEvent"] = relationship(back_populates="reminders")


class RecurrenceException(EntityMixin, Base):
    """Override or cancellation of a single occurrence of a recurring event."""

    __tablename__ = "recurrence_exception"

    calendar_event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("calendar_event.id"), nullable=False, index=True
    )
    original_start_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    is_cancelled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    title: Mapped[Optional[str]] = mapped_column(String(512))
    description: Mapped[Optional[str]] = mapped_column(Text)
    start_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())
    end_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime())
    location: Mapped[Optional[str]] = mapped_column(String(512))

    calendar_event: Mapped["CalendarEvent"] = relationship(back_populates="exceptions")
