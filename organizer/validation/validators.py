"""
Command validators.

Field rules are declared as pydantic models, one per command, listing only
the fields that carry rules. SchemaValidator runs a command through its rule
model and reports every violation grouped by field:

    {"name": ["Must not be empty."],
     "slug": ["Must be 128 characters or fewer.", "Slug must contain only ..."]}

Every rule of a field runs, so one field can report several messages.

Optional fields of update commands are only checked when provided.
"""

import re
import uuid
from dataclasses import fields
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Annotated, Any, Callable, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, ValidationError

from organizer.models import (
    ContactMethodType,
    DevicePlatform,
    SpaceRole,
    SpaceType,
    TaskItemPriority,
    TaskItemStatus,
    WeekStart,
)
from organizer.validation import commands as cmd

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

EMPTY_MESSAGE = "Must not be empty."
SLUG_MESSAGE = "Slug must contain only lowercase letters, numbers, and hyphens."
TIMEZONE_MESSAGE = "Timezone must be a valid IANA timezone identifier."
EMAIL_MESSAGE = "Must be a valid email address."


# =============================================================================
# Field rules
# =============================================================================


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError(EMPTY_MESSAGE)
    return value


def _not_nil(value: uuid.UUID) -> uuid.UUID:
    if value.int == 0:
        raise ValueError(EMPTY_MESSAGE)
    return value


def _valid_slug(value: str) -> str:
    if not SLUG_PATTERN.fullmatch(value):
        raise ValueError(SLUG_MESSAGE)
    return value


def _valid_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(EMAIL_MESSAGE)
    return value


def _valid_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ValueError(TIMEZONE_MESSAGE)
    return value


class RuleViolations(ValueError):
    """Every failed rule of one field."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__(" ".join(messages))


def _max_length(limit: int) -> Callable[[str], str]:
    def check(value: str) -> str:
        if len(value) > limit:
            raise ValueError(f"Must be {limit} characters or fewer.")
        return value

    return check


def _every_rule(*rules: Callable[[str], Any]) -> AfterValidator:
    """Runs all rules on the value and reports each failure, in rule order."""

    def check(value: str) -> str:
        messages = []
        for rule in rules:
            try:
                rule(value)
            except ValueError as e:
                messages.append(str(e))
        if messages:
            raise RuleViolations(messages)
        return value

    return AfterValidator(check)


def required_text(max_length: int, *rules: Callable[[str], Any]) -> Any:
    """Non-blank string of at most ``max_length`` characters."""
    return Annotated[str, _every_rule(_not_blank, _max_length(max_length), *rules)]


def optional_text(max_length: int, *rules: Callable[[str], Any]) -> Any:
    """String of at most ``max_length`` characters, checked only when present."""
    return Optional[Annotated[str, _every_rule(_max_length(max_length), *rules)]]


RequiredId = Annotated[uuid.UUID, AfterValidator(_not_nil)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0)]
NonNegativeInt = Annotated[int, Field(ge=0)]

SlugRule = _valid_slug
EmailRule = _valid_email
TimezoneRule = _valid_timezone


# =============================================================================
# Tenants and users
# =============================================================================


class CreateTenantRules(BaseModel):
    name: required_text(256)
    slug: required_text(128, SlugRule)


class UpdateTenantRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None
    slug: optional_text(128, SlugRule) = None


class CreateUserRules(BaseModel):
    tenant_id: RequiredId
    display_name: required_text(256)
    email: required_text(320, EmailRule)
    timezone: required_text(64, TimezoneRule)
    week_start: WeekStart
    locale: optional_text(16) = None


class UpdateUserRules(BaseModel):
    id: RequiredId
    display_name: optional_text(256) = None
    email: optional_text(320, EmailRule) = None
    timezone: optional_text(64, TimezoneRule) = None
    week_start: Optional[WeekStart] = None
    locale: optional_text(16) = None


class CreateDeviceRules(BaseModel):
    user_id: RequiredId
    device_name: required_text(256)
    platform: DevicePlatform
    fcm_token: required_text(4096)


class UpdateDeviceRules(BaseModel):
    id: RequiredId
    device_name: optional_text(256) = None
    fcm_token: optional_text(4096) = None


# =============================================================================
# Spaces
# =============================================================================


class CreateSpaceRules(BaseModel):
    tenant_id: RequiredId
    name: required_text(256)
    space_type: SpaceType
    created_by_user_id: RequiredId


class UpdateSpaceRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None
    space_type: Optional[SpaceType] = None


class AddSpaceMemberRules(BaseModel):
    space_id: RequiredId
    user_id: RequiredId
    role: SpaceRole


class UpdateSpaceMemberRoleRules(BaseModel):
    space_id: RequiredId
    user_id: RequiredId
    new_role: SpaceRole


# =============================================================================
# Projects and tasks
# =============================================================================


class CreateProjectRules(BaseModel):
    space_id: RequiredId
    name: required_text(256)
    description: optional_text(2000) = None


class UpdateProjectRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None
    description: optional_text(2000) = None


class CreateTaskItemRules(BaseModel):
    space_id: RequiredId
    title: required_text(512)
    description: optional_text(4000) = None
    status: TaskItemStatus
    priority: TaskItemPriority
    recurrence_rule: optional_text(1024) = None


class UpdateTaskItemRules(BaseModel):
    id: RequiredId
    title: optional_text(512) = None
    description: optional_text(4000) = None
    status: Optional[TaskItemStatus] = None
    priority: Optional[TaskItemPriority] = None
    recurrence_rule: optional_text(1024) = None


# =============================================================================
# Calendars
# =============================================================================


class CreateCalendarRules(BaseModel):
    space_id: RequiredId
    name: required_text(256)
    color: required_text(16)


class UpdateCalendarRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None
    color: optional_text(16) = None


class CreateCalendarEventRules(BaseModel):
    calendar_id: RequiredId
    title: required_text(512)
    timezone: required_text(64)
    recurrence_rule: optional_text(512) = None
    location: optional_text(512) = None


class UpdateCalendarEventRules(BaseModel):
    id: RequiredId
    title: optional_text(512) = None
    timezone: optional_text(64) = None
    recurrence_rule: optional_text(512) = None
    location: optional_text(512) = None


# =============================================================================
# Contacts
# =============================================================================


class CreatePersonRules(BaseModel):
    space_id: RequiredId
    first_name: required_text(256)
    last_name: required_text(256)
    notes: optional_text(4000) = None


class UpdatePersonRules(BaseModel):
    id: RequiredId
    first_name: optional_text(256) = None
    last_name: optional_text(256) = None
    notes: optional_text(4000) = None


class CreateContactMethodRules(BaseModel):
    person_id: RequiredId
    type: ContactMethodType
    value: required_text(512)
    label: optional_text(128) = None


class UpdateContactMethodRules(BaseModel):
    id: RequiredId
    type: Optional[ContactMethodType] = None
    value: optional_text(512) = None
    label: optional_text(128) = None


class CreateAddressRules(BaseModel):
    person_id: RequiredId
    label: optional_text(128) = None
    street1: required_text(512)
    street2: optional_text(512) = None
    city: required_text(256)
    state: optional_text(128) = None
    postal_code: optional_text(32) = None
    country: required_text(128)


class UpdateAddressRules(BaseModel):
    id: RequiredId
    label: optional_text(128) = None
    street1: optional_text(512) = None
    street2: optional_text(512) = None
    city: optional_text(256) = None
    state: optional_text(128) = None
    postal_code: optional_text(32) = None
    country: optional_text(128) = None


class CreateImportantDateRules(BaseModel):
    person_id: RequiredId
    label: required_text(256)
    date_value: date


class UpdateImportantDateRules(BaseModel):
    id: RequiredId
    label: optional_text(256) = None


# =============================================================================
# Shopping lists
# =============================================================================


class CreateShoppingListRules(BaseModel):
    space_id: RequiredId
    name: required_text(256)


class UpdateShoppingListRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None


class CreateListItemRules(BaseModel):
    shopping_list_id: RequiredId
    name: required_text(256)
    quantity: NonNegativeDecimal
    unit: optional_text(32) = None
    sort_order: NonNegativeInt


class UpdateListItemRules(BaseModel):
    id: RequiredId
    name: optional_text(256) = None
    quantity: Optional[NonNegativeDecimal] = None
    unit: optional_text(32) = None
    sort_order: Optional[NonNegativeInt] = None


# =============================================================================
# Validators
# =============================================================================


class CommandValidator(Protocol):
    def validate(self, command: Any) -> dict[str, list[str]]:
        """Return every violation grouped by field; empty when valid."""
        ...


def _messages(error: Mapping[str, Any]) -> list[str]:
    """Human-readable messages for one pydantic error."""
    ctx = error.get("ctx") or {}
    error_type = error["type"]

    if error_type == "missing" or error.get("input") is None:
        return [EMPTY_MESSAGE]
    if error_type == "value_error" and "error" in ctx:
        cause = ctx["error"]
        if isinstance(cause, RuleViolations):
            return list(cause.messages)
        return [str(cause)]
    if error_type == "greater_than_equal":
        return [f"Must be greater than or equal to {ctx['ge']}."]
    if error_type == "enum":
        return [f"Must be one of {ctx['expected']}."]
    return [error["msg"]]


class SchemaValidator:
    """Validates a command against a pydantic rule model."""

    def __init__(self, schema: type[BaseModel]):
        self.schema = schema

    def validate(self, command: Any) -> dict[str, list[str]]:
        values = {field.name: getattr(command, field.name) for field in fields(command)}
        try:
            self.schema.model_validate(values)
        except ValidationError as e:
            errors: dict[str, list[str]] = {}
            for error in e.errors():
                field_name = str(error["loc"][0]) if error["loc"] else "__root__"
                errors.setdefault(field_name, []).extend(_messages(error))
            return errors
        return {}

    def __repr__(self) -> str:
        return f"<SchemaValidator({self.schema.__name__})>"


VALIDATORS: Mapping[type, CommandValidator] = MappingProxyType({
    cmd.CreateTenantCommand: SchemaValidator(CreateTenantRules),
    cmd.UpdateTenantCommand: SchemaValidator(UpdateTenantRules),
    cmd.CreateUserCommand: SchemaValidator(CreateUserRules),
    cmd.UpdateUserCommand: SchemaValidator(UpdateUserRules),
    cmd.CreateDeviceCommand: SchemaValidator(CreateDeviceRules),
    cmd.UpdateDeviceCommand: SchemaValidator(UpdateDeviceRules),
    cmd.CreateSpaceCommand: SchemaValidator(CreateSpaceRules),
    cmd.UpdateSpaceCommand: SchemaValidator(UpdateSpaceRules),
    cmd.AddSpaceMemberCommand: SchemaValidator(AddSpaceMemberRules),
    cmd.UpdateSpaceMemberRoleCommand: SchemaValidator(UpdateSpaceMemberRoleRules),
    cmd.CreateProjectCommand: SchemaValidator(CreateProjectRules),
    cmd.UpdateProjectCommand: SchemaValidator(UpdateProjectRules),
    cmd.CreateTaskItemCommand: SchemaValidator(CreateTaskItemRules),
    cmd.UpdateTaskItemCommand: SchemaValidator(UpdateTaskItemRules),
    cmd.CreateCalendarCommand: SchemaValidator(CreateCalendarRules),
    cmd.UpdateCalendarCommand: SchemaValidator(UpdateCalendarRules),
    cmd.CreateCalendarEventCommand: SchemaValidator(CreateCalendarEventRules),
    cmd.UpdateCalendarEventCommand: SchemaValidator(UpdateCalendarEventRules),
    cmd.CreatePersonCommand: SchemaValidator(CreatePersonRules),
    cmd.UpdatePersonCommand: SchemaValidator(UpdatePersonRules),
    cmd.CreateContactMethodCommand: SchemaValidator(CreateContactMethodRules),
    cmd.UpdateContactMethodCommand: SchemaValidator(UpdateContactMethodRules),
    cmd.CreateAddressCommand: SchemaValidator(CreateAddressRules),
    cmd.UpdateAddressCommand: SchemaValidator(UpdateAddressRules),
    cmd.CreateImportantDateCommand: SchemaValidator(CreateImportantDateRules),
    cmd.UpdateImportantDateCommand: SchemaValidator(UpdateImportantDateRules),
    cmd.CreateShoppingListCommand: SchemaValidator(CreateShoppingListRules),
    cmd.UpdateShoppingListCommand: SchemaValidator(UpdateShoppingListRules),
    cmd.CreateListItemCommand: SchemaValidator(CreateListItemRules),
    cmd.UpdateListItemCommand: SchemaValidator(UpdateListItemRules),
})
