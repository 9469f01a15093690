"""
Mutation input validation.

- arguments: ArgumentView, uniform lookup over argument bags
- commands: immutable command value objects
- factories: mutation name -> command factory registry
- validators: pydantic rule models and the command -> validator registry
- dispatcher: MutationValidationDispatcher and the validated_mutation decorator
"""

from organizer.validation.arguments import ArgumentView
from organizer.validation.dispatcher import (
    MutationValidationDispatcher,
    get_dispatcher,
    validated_mutation,
)
from organizer.validation.factories import COMMAND_FACTORIES, build_command
from organizer.validation.validators import VALIDATORS, CommandValidator, SchemaValidator

__all__ = [
    "ArgumentView",
    "COMMAND_FACTORIES",
    "CommandValidator",
    "MutationValidationDispatcher",
    "SchemaValidator",
    "VALIDATORS",
    "build_command",
    "get_dispatcher",
    "validated_mutation",
]
