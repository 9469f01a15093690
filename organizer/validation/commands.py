"""
Mutation commands.

Immutable value objects carrying a mutation's input after it has been read
from the argument bag and coerced to domain types. Validators inspect them;
they never touch the database.

Update commands carry the target ``id`` plus the fields being changed; a field
left as None is not being changed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from organizer.models import (
    ContactMethodType,
    DevicePlatform,
    SpaceRole,
    SpaceType,
    TaskItemPriority,
    TaskItemStatus,
    WeekStart,
)


# =============================================================================
# Tenants and users
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateTenantCommand:
    name: str
    slug: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateTenantCommand:
    id: uuid.UUID
    name: Optional[str] = None
    slug: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateUserCommand:
    tenant_id: uuid.UUID
    display_name: str
    email: str
    timezone: str
    week_start: WeekStart
    locale: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateUserCommand:
    id: uuid.UUID
    display_name: Optional[str] = None
    email: Optional[str] = None
    timezone: Optional[str] = None
    week_start: Optional[WeekStart] = None
    locale: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateDeviceCommand:
    user_id: uuid.UUID
    device_name: str
    platform: DevicePlatform
    fcm_token: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateDeviceCommand:
    id: uuid.UUID
    device_name: Optional[str] = None
    fcm_token: Optional[str] = None
    last_sync_at: Optional[datetime] = None


# =============================================================================
# Spaces
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateSpaceCommand:
    tenant_id: uuid.UUID
    name: str
    space_type: SpaceType
    created_by_user_id: uuid.UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateSpaceCommand:
    id: uuid.UUID
    name: Optional[str] = None
    space_type: Optional[SpaceType] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AddSpaceMemberCommand:
    space_id: uuid.UUID
    user_id: uuid.UUID
    role: SpaceRole


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateSpaceMemberRoleCommand:
    space_id: uuid.UUID
    user_id: uuid.UUID
    new_role: SpaceRole


# =============================================================================
# Projects and tasks
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateProjectCommand:
    space_id: uuid.UUID
    name: str
    description: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateProjectCommand:
    id: uuid.UUID
    name: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateTaskItemCommand:
    space_id: uuid.UUID
    title: str
    status: TaskItemStatus
    priority: TaskItemPriority
    description: Optional[str] = None
    project_id: Optional[uuid.UUID] = None
    due_at: Optional[datetime] = None
    due_date: Optional[date] = None
    recurrence_rule: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateTaskItemCommand:
    id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskItemStatus] = None
    priority: Optional[TaskItemPriority] = None
    project_id: Optional[uuid.UUID] = None
    due_at: Optional[datetime] = None
    due_date: Optional[date] = None
    recurrence_rule: Optional[str] = None


# =============================================================================
# Calendars
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateCalendarCommand:
    space_id: uuid.UUID
    name: str
    color: str
    is_default: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateCalendarCommand:
    id: uuid.UUID
    name: Optional[str] = None
    color: Optional[str] = None
    is_default: Optional[bool] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateCalendarEventCommand:
    calendar_id: uuid.UUID
    title: str
    is_all_day: bool
    start_at: datetime
    end_at: datetime
    timezone: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    recurrence_rule: Optional[str] = None
    recurrence_end_at: Optional[datetime] = None
    location: Optional[str] = None
    event_type_id: Optional[uuid.UUID] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateCalendarEventCommand:
    id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    is_all_day: Optional[bool] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timezone: Optional[str] = None
    recurrence_rule: Optional[str] = None
    recurrence_end_at: Optional[datetime] = None
    location: Optional[str] = None
    event_type_id: Optional[uuid.UUID] = None


# =============================================================================
# Contacts
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreatePersonCommand:
    space_id: uuid.UUID
    first_name: str
    last_name: str
    notes: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdatePersonCommand:
    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateContactMethodCommand:
    person_id: uuid.UUID
    type: ContactMethodType
    value: str
    is_primary: bool
    label: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateContactMethodCommand:
    id: uuid.UUID
    type: Optional[ContactMethodType] = None
    value: Optional[str] = None
    label: Optional[str] = None
    is_primary: Optional[bool] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateAddressCommand:
    person_id: uuid.UUID
    street1: str
    city: str
    country: str
    is_primary: bool
    label: Optional[str] = None
    street2: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateAddressCommand:
    id: uuid.UUID
    label: Optional[str] = None
    street1: Optional[str] = None
    street2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    is_primary: Optional[bool] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateImportantDateCommand:
    person_id: uuid.UUID
    label: str
    date_value: date
    event_type_id: Optional[uuid.UUID] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateImportantDateCommand:
    id: uuid.UUID
    label: Optional[str] = None
    date_value: Optional[date] = None
    event_type_id: Optional[uuid.UUID] = None


# =============================================================================
# Shopping lists
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateShoppingListCommand:
    space_id: uuid.UUID
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateShoppingListCommand:
    id: uuid.UUID
    name: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateListItemCommand:
    shopping_list_id: uuid.UUID
    name: str
    quantity: Decimal
    sort_order: int
    unit: Optional[str] = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateListItemCommand:
    id: uuid.UUID
    name: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    is_checked: Optional[bool] = None
    sort_order: Optional[int] = None
