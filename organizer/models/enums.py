"""
Domain enumerations.

Integer values are stable identifiers and must not be renumbered.
"""

from enum import Enum, IntEnum


# =============================================================================
# Change ledger
# =============================================================================


class ChangeOperation(IntEnum):
    """Kind of mutation recorded in the change log."""

    CREATED = 0
    UPDATED = 1
    DELETED = 2


class ChangeLogEntityType(IntEnum):
    """Discriminator for the entity kind a change-log row describes."""

    TENANT = 0
    USER = 1
    SPACE = 2
    SPACE_MEMBERSHIP = 3
    CALENDAR = 4
    CALENDAR_EVENT = 5
    EVENT_TYPE = 6
    EVENT_REMINDER = 7
    TASK_ITEM = 8
    TASK_CATEGORY = 9
    CATEGORY = 10
    PROJECT = 11
    PERSON = 12
    CONTACT_METHOD = 13
    ADDRESS = 14
    IMPORTANT_DATE = 15
    SHOPPING_LIST = 16
    LIST_ITEM = 17
    ATTACHMENT = 18
    RECURRENCE_EXCEPTION = 19


# =============================================================================
# Spaces and users
# =============================================================================


class SpaceType(str, Enum):
    PERSONAL = "PERSONAL"
    SHARED = "SHARED"
    SYSTEM = "SYSTEM"


class SpaceRole(str, Enum):
    VIEWER = "VIEWER"
    EDITOR = "EDITOR"
    OWNER = "OWNER"


class WeekStart(IntEnum):
    """First day of the week, numbered like the days of the week (Sunday = 0)."""

    SUNDAY = 0
    MONDAY = 1
    SATURDAY = 6


class DevicePlatform(str, Enum):
    ANDROID = "ANDROID"
    IOS = "IOS"
    WEB = "WEB"


# =============================================================================
# Tasks
# =============================================================================


class TaskItemStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TaskItemPriority(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# =============================================================================
# Contacts and calendar
# =============================================================================


class ContactMethodType(str, Enum):
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    OTHER = "OTHER"


class ReminderMethod(str, Enum):
    PUSH = "PUSH"
    EMAIL = "EMAIL"
    IN_APP = "IN_APP"
