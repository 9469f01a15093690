"""
Change-type registry: closed two-way mapping between entity models and the
change-log entity type discriminator.

ChangeLog itself is deliberately absent, which is what keeps the ledger from
logging its own inserts.

Usage:
    from organizer.persistence.change_types import try_get_entity_type

    entity_type = try_get_entity_type(type(entity))
    if entity_type is None:
        return  # not a tracked kind
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from organizer.models import (
    Address,
    Attachment,
    Calendar,
    CalendarEvent,
    Category,
    ChangeLogEntityType,
    ContactMethod,
    EventReminder,
    EventType,
    ImportantDate,
    ListItem,
    Person,
    Project,
    RecurrenceException,
    ShoppingList,
    Space,
    SpaceMembership,
    TaskCategory,
    TaskItem,
    Tenant,
    User,
)

ENTITY_TYPE_BY_MODEL: Mapping[type, ChangeLogEntityType] = MappingProxyType({
    Tenant: ChangeLogEntityType.TENANT,
    User: ChangeLogEntityType.USER,
    Space: ChangeLogEntityType.SPACE,
    SpaceMembership: ChangeLogEntityType.SPACE_MEMBERSHIP,
    Calendar: ChangeLogEntityType.CALENDAR,
    CalendarEvent: ChangeLogEntityType.CALENDAR_EVENT,
    EventType: ChangeLogEntityType.EVENT_TYPE,
    EventReminder: ChangeLogEntityType.EVENT_REMINDER,
    TaskItem: ChangeLogEntityType.TASK_ITEM,
    TaskCategory: ChangeLogEntityType.TASK_CATEGORY,
    Category: ChangeLogEntityType.CATEGORY,
    Project: ChangeLogEntityType.PROJECT,
    Person: ChangeLogEntityType.PERSON,
    ContactMethod: ChangeLogEntityType.CONTACT_METHOD,
    Address: ChangeLogEntityType.ADDRESS,
    ImportantDate: ChangeLogEntityType.IMPORTANT_DATE,
    ShoppingList: ChangeLogEntityType.SHOPPING_LIST,
    ListItem: ChangeLogEntityType.LIST_ITEM,
    Attachment: ChangeLogEntityType.ATTACHMENT,
    RecurrenceException: ChangeLogEntityType.RECURRENCE_EXCEPTION,
})

MODEL_BY_ENTITY_TYPE: Mapping[ChangeLogEntityType, type] = MappingProxyType(
    {entity_type: model for model, entity_type in ENTITY_TYPE_BY_MODEL.items()}
)


def try_get_entity_type(model: type) -> ChangeLogEntityType | None:
    """Entity type for a model class, or None when the kind is not tracked."""
    return ENTITY_TYPE_BY_MODEL.get(model)


def get_entity_type(model: type) -> ChangeLogEntityType:
    """Entity type for a model class. Raises LookupError for untracked kinds."""
    entity_type = ENTITY_TYPE_BY_MODEL.get(model)
    if entity_type is None:
        raise LookupError(f"{model.__name__} has no change-log entity type")
    return entity_type


def get_model_class(entity_type: ChangeLogEntityType) -> type:
    """Model class for an entity type. Raises LookupError for unmapped values."""
    model = MODEL_BY_ENTITY_TYPE.get(entity_type)
    if model is None:
        raise LookupError(f"No model is registered for entity type {entity_type!r}")
    return model
