"""Interaction state machine for a single form instance."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from userform.core.types import FieldName, parse_field_name
from userform.form.models import (
    FieldState,
    FormSnapshot,
    SubmitBlocked,
    SubmitResult,
)
from userform.form.schema import Schema

logger = logging.getLogger(__name__)

SubmitHandler = Callable[[dict[str, str]], Any]


def log_submission(values: dict[str, str]) -> None:
    """Default submit handler: record the submitted values in the log."""
    logger.info("Form submitted: %s", values)


def _checked(field: FieldName | str, value: object) -> FieldName:
    name = parse_field_name(field)
    if not isinstance(value, str):
        raise TypeError(f"Value for {name.value!r} must be a string, got {type(value).__name__}")
    return name


class FormEngine:
    """Owns field values and touched flags for one form instance.

    Errors are never stored: they are recomputed from the current values
    whenever they are read, so a corrected value can never leave a stale
    message behind. A field's error is displayed only once it is touched.

    Each field moves one way from pristine to touched, either through
    ``touch`` (blur/commit) or through any ``submit`` attempt. Only
    ``reset`` returns fields to pristine.
    """

    def __init__(self, schema: Schema, on_submit: SubmitHandler | None = None) -> None:
        self._schema = schema
        self._on_submit = on_submit or log_submission
        self._values: dict[FieldName, str] = {}
        self._touched: dict[FieldName, bool] = {}
        self.reset()

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def form_id(self) -> str:
        return self._schema.definition.id

    # -- State (read) --

    @property
    def values(self) -> dict[str, str]:
        return {name.value: value for name, value in self._values.items()}

    @property
    def touched(self) -> dict[str, bool]:
        return {name.value: flag for name, flag in self._touched.items()}

    @property
    def errors(self) -> dict[str, str]:
        return {
            name.value: message
            for name, message in self._schema.validate_all(self._values).items()
        }

    @property
    def displayed_errors(self) -> dict[str, str]:
        return self._displayed(self.errors)

    def _displayed(self, errors: dict[str, str]) -> dict[str, str]:
        return {name: msg for name, msg in errors.items() if self._touched[FieldName(name)]}

    @property
    def is_valid(self) -> bool:
        return not self._schema.validate_all(self._values)

    def field_state(self, field: FieldName | str) -> FieldState:
        name = parse_field_name(field)
        error = self._schema.validate_field(name, self._values[name])
        touched = self._touched[name]
        return FieldState(
            name=name,
            value=self._values[name],
            touched=touched,
            error=error,
            displayed_error=error if touched else None,
        )

    def snapshot(self) -> FormSnapshot:
        errors = self.errors
        return FormSnapshot(
            form_id=self.form_id,
            values=self.values,
            touched=self.touched,
            errors=errors,
            displayed_errors=self._displayed(errors),
            valid=not errors,
        )

    # -- Transitions --

    def set_value(self, field: FieldName | str, value: str) -> None:
        """Overwrite a field's value. Touched flags are left alone."""
        name = _checked(field, value)
        self._values[name] = value
        logger.debug("Field %s set (%d chars)", name.value, len(value))

    def touch(self, field: FieldName | str) -> None:
        """Mark a field as visited. Idempotent."""
        name = parse_field_name(field)
        if not self._touched[name]:
            self._touched[name] = True
            logger.debug("Field %s touched", name.value)

    def submit(self) -> SubmitResult:
        """Attempt to submit the form.

        Every field becomes touched whatever the outcome. The submit handler
        is called with a copy of the values only when no field fails; a
        blocked attempt reports every failing field and calls nothing.
        """
        for name in self._touched:
            self._touched[name] = True

        failures = self._schema.field_errors(self._values)
        if failures:
            blocked = SubmitBlocked(errors=failures)
            logger.info(
                "Submit of form %r blocked by fields: %s",
                self.form_id,
                ", ".join(name.value for name in blocked.fields),
            )
            return SubmitResult(submitted=False, blocked=blocked)

        values = self.values
        self._on_submit(dict(values))
        logger.info("Form %r submitted", self.form_id)
        return SubmitResult(submitted=True, values=values)

    def reset(self) -> None:
        """Return every field to an empty, untouched state."""
        self._values = {name: "" for name in self._schema.field_names}
        self._touched = {name: False for name in self._schema.field_names}

    def load(self, values: Mapping[str, str]) -> None:
        """Set several fields at once, as if each were typed in turn.

        Every name and value is checked before anything is written, so a bad
        entry leaves the form unchanged.
        """
        checked = [(_checked(field, value), value) for field, value in values.items()]
        for name, value in checked:
            self.set_value(name, value)
