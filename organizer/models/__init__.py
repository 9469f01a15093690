"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, EntityMixin and the tenant scope mixins
- enums: Domain and change-ledger enumerations
- tenant: Tenant, User, Device
- space: Space, SpaceMembership
- calendar: Calendar, CalendarEvent, EventType, EventReminder, RecurrenceException
- task: Project, TaskItem, Category, TaskCategory
- contact: Person, ContactMethod, Address, ImportantDate
- shopping: ShoppingList, ListItem
- attachment: Attachment
- change_log: ChangeLog

Scope capabilities:
- tenant-required: User, Space, Device, Attachment
- tenant-optional: Category, EventType
- unscoped: everything else
"""

# Base classes
from .base import (
    Base,
    EntityMixin,
    OptionalTenantScopedMixin,
    TenantScope,
    TenantScopedMixin,
    scope_of,
)

# Enumerations
from .enums import (
    ChangeLogEntityType,
    ChangeOperation,
    ContactMethodType,
    DevicePlatform,
    ReminderMethod,
    SpaceRole,
    SpaceType,
    TaskItemPriority,
    TaskItemStatus,
    WeekStart,
)

# Core tenant models
from .tenant import Tenant, User, Device

# Spaces
from .space import Space, SpaceMembership

# Calendar
from .calendar import Calendar, CalendarEvent, EventType, EventReminder, RecurrenceException

# Tasks
from .task import Project, TaskItem, Category, TaskCategory

# Contacts
from .contact import Person, ContactMethod, Address, ImportantDate

# Shopping lists
from .shopping import ShoppingList, ListItem

# Attachments
from .attachment import Attachment

# Change ledger
from .change_log import ChangeLog

__all__ = [
    # Base
    "Base",
    "EntityMixin",
    "TenantScopedMixin",
    "OptionalTenantScopedMixin",
    "TenantScope",
    "scope_of",
    # Enums
    "ChangeLogEntityType",
    "ChangeOperation",
    "ContactMethodType",
    "DevicePlatform",
    "ReminderMethod",
    "SpaceRole",
    "SpaceType",
    "TaskItemPriority",
    "TaskItemStatus",
    "WeekStart",
    # Tenant
    "Tenant",
    "User",
    "Device",
    # Space
    "Space",
    "SpaceMembership",
    # Calendar
    "Calendar",
    "CalendarEvent",
    "EventType",
    "EventReminder",
    "RecurrenceException",
    # Task
    "Project",
    "TaskItem",
    "Category",
    "TaskCategory",
    # Contact
    "Person",
    "ContactMethod",
    "Address",
    "ImportantDate",
    # Shopping
    "ShoppingList",
    "ListItem",
    # Attachment
    "Attachment",
    # Change ledger
    "ChangeLog",
]
