"""
Shopping list models: ShoppingList, ListItem.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, EntityMixin


class ShoppingList(EntityMixin, Base):
    __tablename__ = "shopping_list"

    space_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("space.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(256), nullable=False)

    items: Mapped[list["ListItem"]] = relationship(
        back_populates="shopping_list", order_by="ListItem.sort_order"
    )


class ListItem(EntityMixin, Base):
    __tablename__ = "list_item"

    shopping_list_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("shopping_list.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False, default=Decimal("1"))
    unit: Mapped[Optional[str]] = mapped_column(String(32))
    is_checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    shopping_list: Mapped["ShoppingList"] = relationship(back_populates="items")
