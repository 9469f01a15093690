"""
Tests for command factories and validators.

Tests verify:
- Every violated field is reported, with a message per broken rule
- Every violated field is reported, each with its message
- Update commands only check the fields they carry
"""

import dataclasses
import uuid
from datetime import date
from decimal import Decimal

import pytest

from organizer.models import SpaceType, WeekStart
from organizer.validation import commands as cmd
from organizer.validation.factories import COMMAND_FACTORIES, build_command
from organizer.validation.validators import (
    EMAIL_MESSAGE,
    EMPTY_MESSAGE,
    SLUG_MESSAGE,
    TIMEZONE_MESSAGE,
    VALIDATORS,
    CreateTenantRules,
    SchemaValidator,
)
from shared.utils.exceptions import CommandContractError


def validate(command):
    return VALIDATORS[type(command)].validate(command)


def valid_user(**overrides):
    values = dict(
        tenant_id=uuid.uuid4(),
        display_name="Ada Lovelace",
        email="ada@daykeeper.io",
        timezone="Europe/London",
        week_start=WeekStart.MONDAY,
    )
    values.update(overrides)
    return cmd.CreateUserCommand(**values)


class TestFactories:
    """Tests for building commands from argument bags."""

    def test_unknown_mutation_has_no_command(self):
        assert build_command("archiveEverything", {}) is None

    def test_create_space_coerces_values(self):
        tenant_id, user_id = uuid.uuid4(), uuid.uuid4()
        command = build_command("createSpace", {
            "tenantId": str(tenant_id),
            "name": "Home",
            "spaceType": "SHARED",
            "createdByUserId": str(user_id),
        })

        assert command == cmd.CreateSpaceCommand(
            tenant_id=tenant_id,
            name="Home",
            space_type=SpaceType.SHARED,
            created_by_user_id=user_id,
        )

    def test_create_list_item_coerces_numbers(self):
        command = build_command("createListItem", {
            "shoppingListId": str(uuid.uuid4()),
            "name": "Milk",
            "quantity": 1.5,
            "sortOrder": "3",
        })

        assert command.quantity == Decimal("1.5")
        assert command.sort_order == 3
        assert command.unit is None

    def test_create_important_date_parses_iso_date(self):
        command = build_command("createImportantDate", {
            "personId": str(uuid.uuid4()),
            "label": "Birthday",
            "dateValue": "1990-05-17",
        })
        assert command.date_value == date(1990, 5, 17)

    def test_missing_required_argument(self):
        with pytest.raises(CommandContractError) as exc_info:
            build_command("createTenant", {"name": "Acme"})
        assert exc_info.value.field == "slug"

    def test_commands_are_immutable(self):
        command = cmd.CreateTenantCommand(name="Acme", slug="acme")
        with pytest.raises(dataclasses.FrozenInstanceError):
            command.name = "Other"  # type: ignore[misc]

    def test_every_factory_builds_a_validated_command(self):
        command_types = {
            obj
            for obj in vars(cmd).values()
            if isinstance(obj, type) and dataclasses.is_dataclass(obj)
        }
        assert len(COMMAND_FACTORIES) == len(command_types) == len(VALIDATORS) == 30
        assert set(VALIDATORS) == command_types


class TestCreateRules:
    """Rules on create commands."""

    def test_valid_command_has_no_errors(self):
        assert validate(cmd.CreateTenantCommand(name="Acme", slug="acme-labs")) == {}
        assert validate(valid_user()) == {}

    def test_slug_format(self):
        errors = validate(cmd.CreateTenantCommand(name="Acme", slug="Acme Labs"))
        assert errors == {"slug": [SLUG_MESSAGE]}

    def test_blank_and_null_are_empty(self):
        errors = validate(cmd.CreateTenantCommand(name="   ", slug=None))
        assert errors == {"name": [EMPTY_MESSAGE], "slug": [EMPTY_MESSAGE]}

    def test_too_long(self):
        errors = validate(cmd.CreateTenantCommand(name="x" * 257, slug="acme"))
        assert errors == {"name": ["Must be 256 characters or fewer."]}

    def test_every_rule_of_a_field_is_reported(self):
        """A value breaking several rules gets one message per broken rule, in rule order."""
        errors = validate(cmd.CreateTenantCommand(name="Acme", slug="BAD SLUG " * 20))

        assert len(errors["slug"]) == 2
        assert errors == {"slug": ["Must be 128 characters or fewer.", SLUG_MESSAGE]}

    def test_empty_slug_breaks_both_rules(self):
        errors = validate(cmd.CreateTenantCommand(name="Acme", slug=""))
        assert errors == {"slug": [EMPTY_MESSAGE, SLUG_MESSAGE]}

    def test_every_violated_field_is_reported(self):
        errors = validate(valid_user(
            tenant_id=uuid.UUID(int=0),
            display_name="",
            email="not-an-email",
            timezone="Mars/Olympus",
        ))

        assert errors == {
            "tenant_id": [EMPTY_MESSAGE],
            "display_name": [EMPTY_MESSAGE],
            "email": [EMAIL_MESSAGE],
            "timezone": [TIMEZONE_MESSAGE],
        }

    def test_missing_enum_is_empty(self):
        errors = validate(valid_user(week_start=None))
        assert errors == {"week_start": [EMPTY_MESSAGE]}

    def test_negative_quantity(self):
        errors = validate(cmd.CreateListItemCommand(
            shopping_list_id=uuid.uuid4(),
            name="Milk",
            quantity=Decimal("-1"),
            sort_order=0,
        ))

        assert list(errors) == ["quantity"]
        assert errors["quantity"][0].startswith("Must be greater than or equal to")

    def test_required_parent_reference(self):
        errors = validate(cmd.CreateProjectCommand(space_id=uuid.UUID(int=0), name="Garden"))
        assert errors == {"space_id": [EMPTY_MESSAGE]}


class TestUpdateRules:
    """Update commands only check what they carry."""

    def test_absent_fields_are_not_checked(self):
        assert validate(cmd.UpdateTenantCommand(id=uuid.uuid4())) == {}
        assert validate(cmd.UpdateUserCommand(id=uuid.uuid4())) == {}

    def test_present_fields_are_checked(self):
        errors = validate(cmd.UpdateTenantCommand(id=uuid.uuid4(), slug="Bad Slug"))
        assert errors == {"slug": [SLUG_MESSAGE]}

    def test_present_field_reports_every_rule(self):
        errors = validate(cmd.UpdateTenantCommand(id=uuid.uuid4(), slug="Bad Slug" * 20))
        assert errors == {"slug": ["Must be 128 characters or fewer.", SLUG_MESSAGE]}

    def test_update_user_timezone(self):
        errors = validate(cmd.UpdateUserCommand(id=uuid.uuid4(), timezone="Mars/Olympus"))
        assert errors == {"timezone": [TIMEZONE_MESSAGE]}

    def test_target_id_is_required(self):
        errors = validate(cmd.UpdateShoppingListCommand(id=uuid.UUID(int=0), name="Groceries"))
        assert errors == {"id": [EMPTY_MESSAGE]}


class TestSchemaValidator:
    """Tests for SchemaValidator itself."""

    def test_repr(self):
        assert repr(SchemaValidator(CreateTenantRules)) == "<SchemaValidator(CreateTenantRules)>"

    def test_fields_without_rules_are_ignored(self):
        command = cmd.CreateSpaceCommand(
            tenant_id=uuid.uuid4(),
            name="Home",
            space_type=SpaceType.PERSONAL,
            created_by_user_id=uuid.uuid4(),
        )
        assert validate(command) == {}
