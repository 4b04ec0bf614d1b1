"""Built-in checks backing the validation rule variants."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Callable

from email_validator import EmailNotValidError, validate_email
from pydantic import StringConstraints, TypeAdapter, ValidationError

from userform.core.types import RuleKind

# Accepts optional "+CC", "(AC)" or bare 2-4 digit groups ahead of a 3-4 digit
# group, an optional space/hyphen, and a final 3-4 digit group.
PHONE_PATTERN = (
    r"^((\+[1-9]{1,4}[ -]?)|(\([0-9]{2,3}\)[ -]?)|([0-9]{2,4})[ -]?)*?"
    r"[0-9]{3,4}[ -]?[0-9]{3,4}$"
)

# Registry of checks: kind -> callable(value, **params) -> bool (True = passes)
CHECKS: dict[RuleKind, Callable[..., bool]] = {}


def register(kind: RuleKind):
    """Decorator to register a check for a rule kind."""
    def decorator(fn):
        CHECKS[kind] = fn
        return fn
    return decorator


@lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> TypeAdapter[str]:
    """Build a full-string matcher for ``pattern``.

    Matching runs on pydantic-core's Rust regex engine, which is linear in
    the input length, so patterns with nested repetition cannot backtrack
    catastrophically. Lookarounds and backreferences are not supported.

    Raises:
        pydantic_core.SchemaError: If the pattern does not compile.
    """
    return TypeAdapter(Annotated[str, StringConstraints(pattern=rf"^(?:{pattern})$")])


def is_blank(value: str) -> bool:
    return not value.strip()


@register(RuleKind.REQUIRED)
def check_required(value: str, **_kwargs: Any) -> bool:
    return not is_blank(value)


@register(RuleKind.PATTERN)
def check_pattern(value: str, pattern: str = "", **_kwargs: Any) -> bool:
    if is_blank(value):
        return True
    try:
        compile_pattern(pattern).validate_python(value)
    except ValidationError:
        return False
    return True


@register(RuleKind.EMAIL)
def check_email(value: str, **_kwargs: Any) -> bool:
    if is_blank(value):
        return True
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
