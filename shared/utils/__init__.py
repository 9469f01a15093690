"""
Utilities module: Exceptions.
"""

from shared.utils.exceptions import (
    AppException,
    CommandContractError,
    CommitError,
    InputValidationError,
    InternalError,
    NotFoundError,
)

__all__ = [
    "AppException",
    "CommandContractError",
    "CommitError",
    "InputValidationError",
    "InternalError",
    "NotFoundError",
]
