"""
Contact models: Person, ContactMethod, Address, ImportantDate.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Optional

from sqlalchemy import Boolean, Date, Enum as SQLEnum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin
from .enums import ContactMethodType


class Person(EntityMixin, Base):
    """A contact kept in a space."""

    __tablename__ = "person"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(256), nullable=False)
    last_name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_full_name: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    notes: Mapped[Optional[str]] = mapped_column(String(4000))

    contact_methods: Mapped[list["ContactMethod"]] = relationship(back_populates="person")
    addresses: Mapped[list["Address"]] = relationship(back_populates="person")
    important_dates: Mapped[list["ImportantDate"]] = relationship(back_populates="person")


class ContactMethod(EntityMixin, Base):
    __tablename__ = "contact_method"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("person.id"), nullable=False, index=True
    )
    type: Mapped[ContactMethodType] = mapped_column(
        SQLEnum(ContactMethodType, name="contact_method_type"), nullable=False
    )
    value: Mapped[str] = mapped_column(String(512), nullable=False)
    label: Mapped[Optional[str]] = mapped_column(String(128))
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    person: Mapped["Person"] = relationship(back_populates="contact_methods")


class Address(EntityMixin, Base):
    __tablename__ = "address"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("person.id"), nullable=False, index=True
    )
    label: Mapped[Optional[str]] = mapped_column(String(128))
    street1: Mapped[str] = mapped_column(String(512), nullable=False)
    street2: Mapped[Optional[str]] = mapped_column(String(512))
    city: Mapped[str] = mapped_column(String(256), nullable=False)
    state: Mapped[Optional[str]] = mapped_column(String(128))
    postal_code: Mapped[Optional[str]] = mapped_column(String(32))
    country: Mapped[str] = mapped_column(String(128), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    person: Mapped["Person"] = relationship(back_populates="addresses")


class ImportantDate(EntityMixin, Base):
    """Birthday, anniversary or other yearly date attached to a person."""

    __tablename__ = "important_date"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("person.id"), nullable=False, index=True
    )
    label: Mapped[str] = mapped_column(String(256), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    event_type_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("event_type.id"), nullable=True
    )

    person: Mapped["Person"] = relationship(back_populates="important_dates")
