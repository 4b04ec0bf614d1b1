"""Core type definitions shared across all userform modules."""

from __future__ import annotations

from enum import StrEnum


class FieldName(StrEnum):
    """The closed set of fields collected by the Create User form."""

    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    EMAIL = "email"
    CONTACT = "contact"
    ADDRESS1 = "address1"
    ADDRESS2 = "address2"


class RuleKind(StrEnum):
    """Tags for the validation rule variants."""

    REQUIRED = "required"
    PATTERN = "pattern"
    EMAIL = "email"


class UnknownFieldError(KeyError):
    """Raised when a name outside the closed field set is used."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown field: {name!r}")
        self.name = name


def parse_field_name(name: str) -> FieldName:
    """Coerce a raw field name to a FieldName.

    Raises:
        UnknownFieldError: If the name is not in the closed set.
    """
    try:
        return FieldName(name)
    except ValueError:
        raise UnknownFieldError(name) from None
