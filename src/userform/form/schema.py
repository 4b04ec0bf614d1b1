"""Stateless evaluation of a form definition's field rules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml

from userform.core.types import FieldName, parse_field_name
from userform.form.models import FieldValidationError, FormDefinition, Rule
from userform.form.validators.common import CHECKS


def load_form_definition(path: str | Path) -> FormDefinition:
    """Parse a single YAML form definition.

    Raises:
        ValueError: If the file does not describe a valid form.
    """
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Form definition {str(path)!r} is not a mapping")
    return FormDefinition.model_validate(data)


def _passes(rule: Rule, value: str) -> bool:
    check = CHECKS[rule.kind]
    return check(value, **rule.model_dump(exclude={"kind", "message"}))


class Schema:
    """Immutable rule set for the closed field set.

    Fields validate independently; within a field the first failing rule wins.
    """

    def __init__(self, definition: FormDefinition) -> None:
        self._definition = definition
        self._rules: dict[FieldName, tuple[Rule, ...]] = {
            f.name: f.rules for f in definition.fields
        }

    @property
    def definition(self) -> FormDefinition:
        return self._definition

    @property
    def field_names(self) -> tuple[FieldName, ...]:
        return tuple(f.name for f in self._definition.fields)

    def validate_field(self, field: FieldName | str, value: str) -> str | None:
        """Return the first failing rule's message, or None if all pass."""
        name = parse_field_name(field)
        for rule in self._rules[name]:
            if not _passes(rule, value):
                return rule.message
        return None

    def validate_all(self, values: Mapping[str, str]) -> dict[FieldName, str]:
        """Validate every field. Only failing fields appear in the result.

        Fields absent from ``values`` are validated as empty strings.
        """
        errors: dict[FieldName, str] = {}
        for name in self.field_names:
            message = self.validate_field(name, values.get(name, ""))
            if message is not None:
                errors[name] = message
        return errors

    def field_errors(self, values: Mapping[str, str]) -> list[FieldValidationError]:
        return [
            FieldValidationError(field=name, message=message)
            for name, message in self.validate_all(values).items()
        ]
