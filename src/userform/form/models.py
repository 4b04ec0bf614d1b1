"""Shared models for the form engine."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import SchemaError

from userform.core.types import FieldName
from userform.form.validators.common import compile_pattern


class RequiredRule(BaseModel):
    """Fails when the trimmed value is empty."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["required"] = "required"
    message: str = "required"


class PatternRule(BaseModel):
    """Fails when a non-blank value does not fully match ``pattern``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pattern"] = "pattern"
    pattern: str
    message: str = "invalid"

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, value: str) -> str:
        try:
            compile_pattern(value)
        except SchemaError as exc:
            raise ValueError(f"Invalid regex pattern {value!r}: {exc}") from exc
        return value


class EmailRule(BaseModel):
    """Fails when a non-blank value is not a syntactically valid address."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["email"] = "email"
    message: str = "invalid email"


Rule = Annotated[Union[RequiredRule, PatternRule, EmailRule], Field(discriminator="kind")]


class FieldDefinition(BaseModel):
    """Definition of a single form field and its ordered rules."""

    model_config = ConfigDict(frozen=True)

    name: FieldName
    label: str
    span: int = Field(default=4, ge=1, le=4)
    rules: tuple[Rule, ...] = ()


class FormDefinition(BaseModel):
    """Full definition of a form loaded from YAML."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    subtitle: str = ""
    submit_label: str = "Submit"
    fields: tuple[FieldDefinition, ...]

    @model_validator(mode="after")
    def covers_closed_field_set(self) -> FormDefinition:
        names = [f.name for f in self.fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Form {self.id!r} repeats fields: {duplicates}")
        missing = [n.value for n in FieldName if n not in names]
        if missing:
            raise ValueError(f"Form {self.id!r} is missing fields: {missing}")
        return self

    def field(self, name: FieldName) -> FieldDefinition:
        for field in self.fields:
            if field.name == name:
                return field
        raise KeyError(name)


class FieldValidationError(BaseModel):
    """A single field's active validation message."""

    field: FieldName
    message: str


class SubmitBlocked(BaseModel):
    """Returned by a submit attempt that found failing fields."""

    errors: list[FieldValidationError]

    @property
    def fields(self) -> list[FieldName]:
        return [e.field for e in self.errors]


class SubmitResult(BaseModel):
    """Outcome of a submit attempt."""

    submitted: bool
    values: dict[str, str] = Field(default_factory=dict)
    blocked: SubmitBlocked | None = None


class FieldState(BaseModel):
    """Everything a renderer needs to draw one field."""

    name: FieldName
    value: str
    touched: bool
    error: str | None = None
    displayed_error: str | None = None


class FormSnapshot(BaseModel):
    """Point-in-time view of a form engine's state."""

    form_id: str
    values: dict[str, str]
    touched: dict[str, bool]
    errors: dict[str, str]
    displayed_errors: dict[str, str]
    valid: bool
