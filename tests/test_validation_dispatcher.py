"""
Tests for the mutation validation dispatcher.

Tests verify:
- Mutations without a factory or validator are allowed through
- Rule violations block the handler with a 422 listing every field
- Failures of the validation machinery itself fail open and are logged
"""

import asyncio
import logging
import uuid
from unittest.mock import MagicMock

import pytest

from organizer.validation import commands as cmd
from organizer.validation.dispatcher import (
    MutationValidationDispatcher,
    get_dispatcher,
    validated_mutation,
)
from organizer.validation.validators import EMPTY_MESSAGE, SLUG_MESSAGE
from shared.utils.exceptions import InputValidationError

DISPATCHER_LOGGER = "organizer.validation.dispatcher"


@pytest.fixture
def dispatcher():
    return MutationValidationDispatcher()


@pytest.fixture
def handler():
    return MagicMock(return_value="handled")


def warnings_from(caplog):
    return [record for record in caplog.records if record.name == DISPATCHER_LOGGER]


class TestDispatch:
    """Tests for MutationValidationDispatcher.dispatch()."""

    def test_unknown_mutation_runs_handler(self, dispatcher, handler):
        arguments = {"anything": 1}

        assert dispatcher.dispatch("archiveEverything", arguments, handler) == "handled"
        handler.assert_called_once_with(arguments)

    def test_valid_mutation_runs_handler(self, dispatcher, handler):
        arguments = {"name": "Acme", "slug": "acme"}

        assert dispatcher.dispatch("createTenant", arguments, handler) == "handled"
        handler.assert_called_once_with(arguments)

    def test_invalid_mutation_is_rejected(self, dispatcher, handler):
        arguments = {"name": "", "slug": "Not A Slug"}

        with pytest.raises(InputValidationError) as exc_info:
            dispatcher.dispatch("createTenant", arguments, handler)

        handler.assert_not_called()
        error = exc_info.value
        assert error.status_code == 422
        assert error.errors == {"name": [EMPTY_MESSAGE], "slug": [SLUG_MESSAGE]}
        assert error.detail["errors"] == error.errors

    def test_validate_returns_command(self, dispatcher):
        tenant_id = str(uuid.uuid4())
        command = dispatcher.validate("updateTenant", {"id": tenant_id, "name": "Acme"})

        assert isinstance(command, cmd.UpdateTenantCommand)
        assert str(command.id) == tenant_id

    def test_shared_dispatcher_is_cached(self):
        assert get_dispatcher() is get_dispatcher()


class TestFailOpen:
    """Machinery failures are logged and the mutation proceeds."""

    def test_missing_required_argument_runs_handler(self, dispatcher, handler, caplog):
        with caplog.at_level(logging.WARNING, logger=DISPATCHER_LOGGER):
            result = dispatcher.dispatch("createTenant", {"name": "Acme"}, handler)

        assert result == "handled"
        (record,) = warnings_from(caplog)
        assert record.getMessage() == "Validation skipped: required argument missing"
        assert record.extra_data == {"mutation": "createTenant", "field": "slug"}

    def test_uncoercible_value_runs_handler(self, dispatcher, handler, caplog):
        arguments = {"id": "not-a-uuid", "name": "Acme"}

        with caplog.at_level(logging.WARNING, logger=DISPATCHER_LOGGER):
            dispatcher.dispatch("updateTenant", arguments, handler)

        handler.assert_called_once_with(arguments)
        (record,) = warnings_from(caplog)
        assert record.getMessage() == "Validation skipped: command could not be built"
        assert record.extra_data["error"].startswith("ValueError")

    def test_crashing_validator_runs_handler(self, handler, caplog):
        broken = MagicMock()
        broken.validate.side_effect = RuntimeError("rule engine down")
        dispatcher = MutationValidationDispatcher(
            validators={cmd.CreateTenantCommand: broken},
        )

        with caplog.at_level(logging.WARNING, logger=DISPATCHER_LOGGER):
            dispatcher.dispatch("createTenant", {"name": "", "slug": "x"}, handler)

        handler.assert_called_once()
        (record,) = warnings_from(caplog)
        assert record.getMessage() == "Validation skipped: validator failed"
        assert "rule engine down" in record.extra_data["error"]

    def test_command_without_validator_is_allowed(self, handler):
        dispatcher = MutationValidationDispatcher(validators={})

        dispatcher.dispatch("createTenant", {"name": "", "slug": "Not A Slug"}, handler)

        handler.assert_called_once()

    def test_handler_errors_propagate(self, dispatcher):
        handler = MagicMock(side_effect=LookupError("gone"))

        with pytest.raises(LookupError):
            dispatcher.dispatch("createTenant", {"name": "Acme", "slug": "acme"}, handler)


class TestValidatedMutation:
    """Tests for the decorator form."""

    def test_sync_handler(self):
        calls = []

        @validated_mutation("createTenant")
        def create_tenant(arguments, actor=None):
            calls.append((arguments, actor))
            return "created"

        assert create_tenant({"name": "Acme", "slug": "acme"}, actor="ada") == "created"
        assert calls == [({"name": "Acme", "slug": "acme"}, "ada")]

        with pytest.raises(InputValidationError):
            create_tenant({"name": "Acme", "slug": "ACME"})
        assert len(calls) == 1

    def test_async_handler(self):
        @validated_mutation("createShoppingList", dispatcher=MutationValidationDispatcher())
        async def create_shopping_list(arguments):
            return arguments["name"]

        arguments = {"spaceId": str(uuid.uuid4()), "name": "Groceries"}
        assert asyncio.run(create_shopping_list(arguments)) == "Groceries"

        with pytest.raises(InputValidationError):
            asyncio.run(create_shopping_list({**arguments, "name": " "}))

    def test_wrapper_keeps_metadata(self):
        @validated_mutation("createTenant")
        def create_tenant(arguments):
            """Create a tenant."""

        assert create_tenant.__name__ == "create_tenant"
        assert create_tenant.__doc__ == "Create a tenant."
