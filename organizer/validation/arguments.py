"""
Uniform read access over mutation argument bags.

A bag may be a mapping keyed by the API's camelCase names, a mapping keyed by
some other capitalization (``TenantId``, ``tenant_id``), or an object exposing
the values as attributes (a pydantic input model, a dataclass). Factories
read every bag the same way:

    args = ArgumentView(arguments, command="createTenant")
    name = args.required("name")
    tenant_id = args.required("tenantId", as_uuid)
    locale = args.optional("locale")
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, TypeVar

from shared.utils.exceptions import CommandContractError

EnumT = TypeVar("EnumT", bound=Enum)

_MISSING = object()
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _normalize(key: str) -> str:
    return key.replace("_", "").lower()


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


# =============================================================================
# Converters
# =============================================================================


def as_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value
    return Decimal(str(value))


def as_enum(enum_cls: type[EnumT]) -> Callable[[Any], EnumT]:
    """Converter accepting an enum member, its name or its value."""

    def convert(value: Any) -> EnumT:
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str) and value in enum_cls.__members__:
            return enum_cls[value]
        return enum_cls(value)

    return convert


# =============================================================================
# View
# =============================================================================


class ArgumentView:
    """
    Read-only lookup over one mutation's arguments.

    Lookup order for a key:
    1. exact key (mappings)
    2. key compared case-insensitively, ignoring underscores (mappings)
    3. attribute named like the key, then its snake_case form (other objects)
    """

    def __init__(self, arguments: Any, command: str = "mutation"):
        self._arguments = arguments
        self._command = command

    @property
    def command(self) -> str:
        return self._command

    def _lookup(self, key: str) -> Any:
        bag = self._arguments
        if bag is None:
            return _MISSING

        if isinstance(bag, Mapping):
            if key in bag:
                return bag[key]
            wanted = _normalize(key)
            for candidate, value in bag.items():
                if isinstance(candidate, str) and _normalize(candidate) == wanted:
                    return value
            return _MISSING

        for name in (key, _snake_case(key)):
            if hasattr(bag, name):
                return getattr(bag, name)
        return _MISSING

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def required(self, key: str, convert: Callable[[Any], Any] | None = None) -> Any:
        """
        Value of an argument the command cannot be built without.

        An explicit null is returned as None and left for the validator to
        reject; only an absent key is a contract failure.

        Raises:
            CommandContractError: If no lookup strategy finds the key.
        """
        value = self._lookup(key)
        if value is _MISSING:
            raise CommandContractError(self._command, key)
        if value is None or convert is None:
            return value
        return convert(value)

    def optional(self, key: str, convert: Callable[[Any], Any] | None = None) -> Any:
        """Value of an argument, or None when absent or null."""
        value = self._lookup(key)
        if value is _MISSING or value is None:
            return None
        if convert is None:
            return value
        return convert(value)

    def __repr__(self) -> str:
        return f"<ArgumentView(command='{self._command}')>"
