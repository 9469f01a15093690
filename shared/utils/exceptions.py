"""
Centralized exceptions for consistent error handling.

Usage:
    from shared.utils.exceptions import NotFoundError, InputValidationError

    raise NotFoundError("Space", space_id)
    raise InputValidationError({"name": ["must not be empty"]})
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: Any,
        log_level: str = "warning",
        log_message: str | None = None,
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(log_message or str(detail), status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    The message never says whether the row was deleted, belongs to another
    tenant, or never existed.

    Usage:
        raise NotFoundError("Space", space_id)
    """

    def __init__(self, entity: str, entity_id: Any = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 422 Validation Errors
# =============================================================================


class InputValidationError(AppException):
    """
    One or more input rule violations (422).

    Carries every violated field, each with one or more messages.

    Usage:
        raise InputValidationError({"slug": ["Slug must contain only ..."]})
    """

    def __init__(self, errors: dict[str, list[str]], **log_context: Any):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "One or more validation errors occurred.", "errors": self.errors},
            log_level="info",
            log_message="Mutation rejected by validation",
            fields=sorted(self.errors),
            **log_context,
        )


class CommandContractError(Exception):
    """
    A command could not be built from an argument bag.

    Signals a mismatch between a mutation's arguments and its command
    contract. It is a programming defect, not a user input error, and is never
    surfaced to callers.
    """

    def __init__(self, command: str, field: str):
        self.command = command
        self.field = field
        super().__init__(f"Required argument '{field}' is missing for {command}")


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Unexpected pipeline state", entity_id=entity.id)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class CommitError(InternalError):
    """
    A unit of work could not be committed.

    Data changes, audit stamps and change-log rows were all rolled back. The
    detail is opaque; the cause is chained and logged.
    """

    def __init__(self, operation: str, **log_context: Any):
        self.operation = operation
        super().__init__(
            "Could not save changes. Please try again.",
            operation=operation,
            **log_context,
        )
