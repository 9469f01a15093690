"""
Mutation validation dispatcher.

Runs before a mutation handler:

1. find the command factory for the mutation name (none -> allow)
2. build the command from the argument bag
3. find the validator for the command type (none -> allow)
4. run it, collecting every violation per field
5. violations -> InputValidationError; the handler never runs

Failures of the validation machinery itself (a missing required argument, a
value the factory cannot coerce, a crashing validator) are logged and the
mutation proceeds unvalidated. Only rule violations block a write.

Usage:
    dispatcher = MutationValidationDispatcher()
    dispatcher.dispatch("createTenant", {"name": "Acme", "slug": "acme"}, handler)

    @validated_mutation("createTenant")
    def create_tenant(arguments: dict) -> Tenant:
        ...
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Mapping, TypeVar

from organizer.validation.arguments import ArgumentView
from organizer.validation.factories import COMMAND_FACTORIES, CommandFactory
from organizer.validation.validators import VALIDATORS, CommandValidator
from shared.config.logging import get_logger
from shared.utils.exceptions import CommandContractError, InputValidationError

logger = get_logger(__name__)

T = TypeVar("T")


class MutationValidationDispatcher:
    """Validates mutation arguments against the command and validator registries."""

    def __init__(
        self,
        factories: Mapping[str, CommandFactory] = COMMAND_FACTORIES,
        validators: Mapping[type, CommandValidator] = VALIDATORS,
    ):
        self._factories = factories
        self._validators = validators

    def _build_command(self, name: str, arguments: Any) -> Any | None:
        factory = self._factories.get(name)
        if factory is None:
            return None

        try:
            return factory(ArgumentView(arguments, command=name))
        except CommandContractError as e:
            logger.warning(
                "Validation skipped: required argument missing",
                mutation=name,
                field=e.field,
            )
        except Exception as e:
            logger.warning(
                "Validation skipped: command could not be built",
                mutation=name,
                error=f"{type(e).__name__}: {e}",
            )
        return None

    def validate(self, name: str, arguments: Any) -> Any | None:
        """
        Validate one mutation's arguments.

        Returns:
            The validated command, or None when the mutation was allowed
            without one.

        Raises:
            InputValidationError: If the command breaks one or more rules.
        """
        command = self._build_command(name, arguments)
        if command is None:
            return None

        validator = self._validators.get(type(command))
        if validator is None:
            return command

        try:
            errors = validator.validate(command)
        except Exception as e:
            logger.warning(
                "Validation skipped: validator failed",
                mutation=name,
                validator=repr(validator),
                error=f"{type(e).__name__}: {e}",
            )
            return command

        if errors:
            raise InputValidationError(errors, mutation=name)
        return command

    def dispatch(self, name: str, arguments: Any, handler: Callable[[Any], T]) -> T:
        """Validate, then call ``handler(arguments)``."""
        self.validate(name, arguments)
        return handler(arguments)


@functools.lru_cache
def get_dispatcher() -> MutationValidationDispatcher:
    """Dispatcher over the built-in registries."""
    return MutationValidationDispatcher()


def validated_mutation(
    name: str,
    dispatcher: MutationValidationDispatcher | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator validating a handler's first positional argument (the argument
    bag) before the handler runs. Works with sync and async handlers.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        def check(arguments: Any) -> None:
            (dispatcher or get_dispatcher()).validate(name, arguments)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(arguments: Any, *args: Any, **kwargs: Any) -> Any:
                check(arguments)
                return await func(arguments, *args, **kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(arguments: Any, *args: Any, **kwargs: Any) -> T:
            check(arguments)
            return func(arguments, *args, **kwargs)

        return wrapper

    return decorator
