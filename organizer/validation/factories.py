"""
Mutation name -> command factory registry.

Each factory is a pure function building one command from an ArgumentView.
Mutations without an entry are not validated here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from organizer.models import (
    ContactMethodType,
    DevicePlatform,
    SpaceRole,
    SpaceType,
    TaskItemPriority,
    TaskItemStatus,
    WeekStart,
)
from organizer.validation.arguments import (
    ArgumentView,
    as_date,
    as_datetime,
    as_decimal,
    as_enum,
    as_uuid,
)
from organizer.validation.commands import (
    AddSpaceMemberCommand,
    CreateAddressCommand,
    CreateCalendarCommand,
    CreateCalendarEventCommand,
    CreateContactMethodCommand,
    CreateDeviceCommand,
    CreateImportantDateCommand,
    CreateListItemCommand,
    CreatePersonCommand,
    CreateProjectCommand,
    CreateShoppingListCommand,
    CreateSpaceCommand,
    CreateTaskItemCommand,
    CreateTenantCommand,
    CreateUserCommand,
    UpdateAddressCommand,
    UpdateCalendarCommand,
    UpdateCalendarEventCommand,
    UpdateContactMethodCommand,
    UpdateDeviceCommand,
    UpdateImportantDateCommand,
    UpdateListItemCommand,
    UpdatePersonCommand,
    UpdateProjectCommand,
    UpdateShoppingListCommand,
    UpdateSpaceCommand,
    UpdateSpaceMemberRoleCommand,
    UpdateTaskItemCommand,
    UpdateTenantCommand,
    UpdateUserCommand,
)

CommandFactory = Callable[[ArgumentView], Any]


# =============================================================================
# Tenants and users
# =============================================================================


def create_tenant(args: ArgumentView) -> CreateTenantCommand:
    return CreateTenantCommand(
        name=args.required("name"),
        slug=args.required("slug"),
    )


def update_tenant(args: ArgumentView) -> UpdateTenantCommand:
    return UpdateTenantCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
        slug=args.optional("slug"),
    )


def create_user(args: ArgumentView) -> CreateUserCommand:
    return CreateUserCommand(
        tenant_id=args.required("tenantId", as_uuid),
        display_name=args.required("displayName"),
        email=args.required("email"),
        timezone=args.required("timezone"),
        week_start=args.required("weekStart", as_enum(WeekStart)),
        locale=args.optional("locale"),
    )


def update_user(args: ArgumentView) -> UpdateUserCommand:
    return UpdateUserCommand(
        id=args.required("id", as_uuid),
        display_name=args.optional("displayName"),
        email=args.optional("email"),
        timezone=args.optional("timezone"),
        week_start=args.optional("weekStart", as_enum(WeekStart)),
        locale=args.optional("locale"),
    )


def create_device(args: ArgumentView) -> CreateDeviceCommand:
    return CreateDeviceCommand(
        user_id=args.required("userId", as_uuid),
        device_name=args.required("deviceName"),
        platform=args.required("platform", as_enum(DevicePlatform)),
        fcm_token=args.required("fcmToken"),
    )


def update_device(args: ArgumentView) -> UpdateDeviceCommand:
    return UpdateDeviceCommand(
        id=args.required("id", as_uuid),
        device_name=args.optional("deviceName"),
        fcm_token=args.optional("fcmToken"),
        last_sync_at=args.optional("lastSyncAt", as_datetime),
    )


# =============================================================================
# Spaces
# =============================================================================


def create_space(args: ArgumentView) -> CreateSpaceCommand:
    return CreateSpaceCommand(
        tenant_id=args.required("tenantId", as_uuid),
        name=args.required("name"),
        space_type=args.required("spaceType", as_enum(SpaceType)),
        created_by_user_id=args.required("createdByUserId", as_uuid),
    )


def update_space(args: ArgumentView) -> UpdateSpaceCommand:
    return UpdateSpaceCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
        space_type=args.optional("spaceType", as_enum(SpaceType)),
    )


def add_space_member(args: ArgumentView) -> AddSpaceMemberCommand:
    return AddSpaceMemberCommand(
        space_id=args.required("spaceId", as_uuid),
        user_id=args.required("userId", as_uuid),
        role=args.required("role", as_enum(SpaceRole)),
    )


def update_space_member_role(args: ArgumentView) -> UpdateSpaceMemberRoleCommand:
    return UpdateSpaceMemberRoleCommand(
        space_id=args.required("spaceId", as_uuid),
        user_id=args.required("userId", as_uuid),
        new_role=args.required("newRole", as_enum(SpaceRole)),
    )


# =============================================================================
# Projects and tasks
# =============================================================================


def create_project(args: ArgumentView) -> CreateProjectCommand:
    return CreateProjectCommand(
        space_id=args.required("spaceId", as_uuid),
        name=args.required("name"),
        description=args.optional("description"),
    )


def update_project(args: ArgumentView) -> UpdateProjectCommand:
    return UpdateProjectCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
        description=args.optional("description"),
    )


def create_task_item(args: ArgumentView) -> CreateTaskItemCommand:
    return CreateTaskItemCommand(
        space_id=args.required("spaceId", as_uuid),
        title=args.required("title"),
        description=args.optional("description"),
        project_id=args.optional("projectId", as_uuid),
        status=args.required("status", as_enum(TaskItemStatus)),
        priority=args.required("priority", as_enum(TaskItemPriority)),
        due_at=args.optional("dueAt", as_datetime),
        due_date=args.optional("dueDate", as_date),
        recurrence_rule=args.optional("recurrenceRule"),
    )


def update_task_item(args: ArgumentView) -> UpdateTaskItemCommand:
    return UpdateTaskItemCommand(
        id=args.required("id", as_uuid),
        title=args.optional("title"),
        description=args.optional("description"),
        status=args.optional("status", as_enum(TaskItemStatus)),
        priority=args.optional("priority", as_enum(TaskItemPriority)),
        project_id=args.optional("projectId", as_uuid),
        due_at=args.optional("dueAt", as_datetime),
        due_date=args.optional("dueDate", as_date),
        recurrence_rule=args.optional("recurrenceRule"),
    )


# =============================================================================
# Calendars
# =============================================================================


def create_calendar(args: ArgumentView) -> CreateCalendarCommand:
    return CreateCalendarCommand(
        space_id=args.required("spaceId", as_uuid),
        name=args.required("name"),
        color=args.required("color"),
        is_default=args.required("isDefault"),
    )


def update_calendar(args: ArgumentView) -> UpdateCalendarCommand:
    return UpdateCalendarCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
        color=args.optional("color"),
        is_default=args.optional("isDefault"),
    )


def create_calendar_event(args: ArgumentView) -> CreateCalendarEventCommand:
    return CreateCalendarEventCommand(
        calendar_id=args.required("calendarId", as_uuid),
        title=args.required("title"),
        description=args.optional("description"),
        is_all_day=args.required("isAllDay"),
        start_at=args.required("startAt", as_datetime),
        end_at=args.required("endAt", as_datetime),
        start_date=args.optional("startDate", as_date),
        end_date=args.optional("endDate", as_date),
        timezone=args.required("timezone"),
        recurrence_rule=args.optional("recurrenceRule"),
        recurrence_end_at=args.optional("recurrenceEndAt", as_datetime),
        location=args.optional("location"),
        event_type_id=args.optional("eventTypeId", as_uuid),
    )


def update_calendar_event(args: ArgumentView) -> UpdateCalendarEventCommand:
    return UpdateCalendarEventCommand(
        id=args.required("id", as_uuid),
        title=args.optional("title"),
        description=args.optional("description"),
        is_all_day=args.optional("isAllDay"),
        start_at=args.optional("startAt", as_datetime),
        end_at=args.optional("endAt", as_datetime),
        start_date=args.optional("startDate", as_date),
        end_date=args.optional("endDate", as_date),
        timezone=args.optional("timezone"),
        recurrence_rule=args.optional("recurrenceRule"),
        recurrence_end_at=args.optional("recurrenceEndAt", as_datetime),
        location=args.optional("location"),
        event_type_id=args.optional("eventTypeId", as_uuid),
    )


# =============================================================================
# Contacts
# =============================================================================


def create_person(args: ArgumentView) -> CreatePersonCommand:
    return CreatePersonCommand(
        space_id=args.required("spaceId", as_uuid),
        first_name=args.required("firstName"),
        last_name=args.required("lastName"),
        notes=args.optional("notes"),
    )


def update_person(args: ArgumentView) -> UpdatePersonCommand:
    return UpdatePersonCommand(
        id=args.required("id", as_uuid),
        first_name=args.optional("firstName"),
        last_name=args.optional("lastName"),
        notes=args.optional("notes"),
    )


def create_contact_method(args: ArgumentView) -> CreateContactMethodCommand:
    return CreateContactMethodCommand(
        person_id=args.required("personId", as_uuid),
        type=args.required("type", as_enum(ContactMethodType)),
        value=args.required("value"),
        label=args.optional("label"),
        is_primary=args.required("isPrimary"),
    )


def update_contact_method(args: ArgumentView) -> UpdateContactMethodCommand:
    return UpdateContactMethodCommand(
        id=args.required("id", as_uuid),
        type=args.optional("type", as_enum(ContactMethodType)),
        value=args.optional("value"),
        label=args.optional("label"),
        is_primary=args.optional("isPrimary"),
    )


def create_address(args: ArgumentView) -> CreateAddressCommand:
    return CreateAddressCommand(
        person_id=args.required("personId", as_uuid),
        label=args.optional("label"),
        street1=args.required("street1"),
        street2=args.optional("street2"),
        city=args.required("city"),
        state=args.optional("state"),
        postal_code=args.optional("postalCode"),
        country=args.required("country"),
        is_primary=args.required("isPrimary"),
    )


def update_address(args: ArgumentView) -> UpdateAddressCommand:
    return UpdateAddressCommand(
        id=args.required("id", as_uuid),
        label=args.optional("label"),
        street1=args.optional("street1"),
        street2=args.optional("street2"),
        city=args.optional("city"),
        state=args.optional("state"),
        postal_code=args.optional("postalCode"),
        country=args.optional("country"),
        is_primary=args.optional("isPrimary"),
    )


def create_important_date(args: ArgumentView) -> CreateImportantDateCommand:
    return CreateImportantDateCommand(
        person_id=args.required("personId", as_uuid),
        label=args.required("label"),
        date_value=args.required("dateValue", as_date),
        event_type_id=args.optional("eventTypeId", as_uuid),
    )


def update_important_date(args: ArgumentView) -> UpdateImportantDateCommand:
    return UpdateImportantDateCommand(
        id=args.required("id", as_uuid),
        label=args.optional("label"),
        date_value=args.optional("dateValue", as_date),
        event_type_id=args.optional("eventTypeId", as_uuid),
    )


# =============================================================================
# Shopping lists
# =============================================================================


def create_shopping_list(args: ArgumentView) -> CreateShoppingListCommand:
    return CreateShoppingListCommand(
        space_id=args.required("spaceId", as_uuid),
        name=args.required("name"),
    )


def update_shopping_list(args: ArgumentView) -> UpdateShoppingListCommand:
    return UpdateShoppingListCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
    )


def create_list_item(args: ArgumentView) -> CreateListItemCommand:
    return CreateListItemCommand(
        shopping_list_id=args.required("shoppingListId", as_uuid),
        name=args.required("name"),
        quantity=args.required("quantity", as_decimal),
        unit=args.optional("unit"),
        sort_order=args.required("sortOrder", int),
    )


def update_list_item(args: ArgumentView) -> UpdateListItemCommand:
    return UpdateListItemCommand(
        id=args.required("id", as_uuid),
        name=args.optional("name"),
        quantity=args.optional("quantity", as_decimal),
        unit=args.optional("unit"),
        is_checked=args.optional("isChecked"),
        sort_order=args.optional("sortOrder", int),
    )


# =============================================================================
# Registry
# =============================================================================


COMMAND_FACTORIES: Mapping[str, CommandFactory] = MappingProxyType({
    "createTenant": create_tenant,
    "updateTenant": update_tenant,
    "createUser": create_user,
    "updateUser": update_user,
    "createDevice": create_device,
    "updateDevice": update_device,
    "createSpace": create_space,
    "updateSpace": update_space,
    "addSpaceMember": add_space_member,
    "updateSpaceMemberRole": update_space_member_role,
    "createProject": create_project,
    "updateProject": update_project,
    "createTaskItem": create_task_item,
    "updateTaskItem": update_task_item,
    "createCalendar": create_calendar,
    "updateCalendar": update_calendar,
    "createCalendarEvent": create_calendar_event,
    "updateCalendarEvent": update_calendar_event,
    "createPerson": create_person,
    "updatePerson": update_person,
    "createContactMethod": create_contact_method,
    "updateContactMethod": update_contact_method,
    "createAddress": create_address,
    "updateAddress": update_address,
    "createImportantDate": create_important_date,
    "updateImportantDate": update_important_date,
    "createShoppingList": create_shopping_list,
    "updateShoppingList": update_shopping_list,
    "createListItem": create_list_item,
    "updateListItem": update_list_item,
})


def build_command(name: str, arguments: Any) -> Any | None:
    """
    Build the command for a mutation, or None when it has no factory.

    Raises:
        CommandContractError: If a required argument is absent.
    """
    factory = COMMAND_FACTORIES.get(name)
    if factory is None:
        return None
    return factory(ArgumentView(arguments, command=name))
