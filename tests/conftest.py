"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from userform.form.registry import FormRegistry
from userform.form.schema import Schema


VALID_VALUES = {
    "firstName": "Ana",
    "lastName": "Lee",
    "email": "ana@x.com",
    "contact": "555-1234",
    "address1": "1 Rd",
    "address2": "Apt 2",
}


@pytest.fixture
def registry() -> FormRegistry:
    return FormRegistry()


@pytest.fixture
def schema(registry) -> Schema:
    return registry.get_schema("create_user")


@pytest.fixture
def valid_values() -> dict[str, str]:
    return dict(VALID_VALUES)
