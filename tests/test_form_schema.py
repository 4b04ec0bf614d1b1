"""Tests for form definition loading and the Schema."""

from __future__ import annotations

import time

import pytest
import yaml
from pydantic import ValidationError

from userform.core.types import FieldName, UnknownFieldError
from userform.form.models import EmailRule, FormDefinition, PatternRule, RequiredRule
from userform.form.registry import FormRegistry
from userform.form.schema import Schema, load_form_definition
from userform.form.validators.common import PHONE_PATTERN


def _form_data(**overrides):
    data = {
        "id": "test_form",
        "title": "Test Form",
        "fields": [
            {"name": name.value, "label": name.value, "rules": [{"kind": "required"}]}
            for name in FieldName
        ],
    }
    data.update(overrides)
    return data


class TestShippedDefinition:
    def test_create_user_layout(self, schema):
        defn = schema.definition
        assert defn.title == "CREATE USER"
        assert defn.subtitle == "Create a new User Profile"
        assert defn.submit_label == "Create New User"
        assert [f.name for f in defn.fields] == list(FieldName)
        assert defn.field(FieldName.FIRST_NAME).span == 2
        assert defn.field(FieldName.LAST_NAME).span == 2
        assert defn.field(FieldName.ADDRESS2).label == "Address 2"
        assert defn.field(FieldName.EMAIL).span == 4

    def test_rule_order(self, schema):
        email = schema.definition.field(FieldName.EMAIL).rules
        assert [type(r) for r in email] == [RequiredRule, EmailRule]
        contact = schema.definition.field(FieldName.CONTACT).rules
        assert [type(r) for r in contact] == [RequiredRule, PatternRule]

    def test_contact_uses_phone_pattern(self, schema):
        rule = schema.definition.field(FieldName.CONTACT).rules[1]
        assert rule.pattern == PHONE_PATTERN
        assert rule.message == "Phone number is not valid"

    def test_definition_is_immutable(self, schema):
        with pytest.raises(ValidationError):
            schema.definition.title = "changed"


class TestValidateField:
    @pytest.mark.parametrize("field", list(FieldName))
    @pytest.mark.parametrize("value", ["", " ", "   \t"])
    def test_blank_is_required(self, schema, field, value):
        assert schema.validate_field(field, value) == "required"

    @pytest.mark.parametrize("field", list(FieldName))
    def test_valid_value_passes(self, schema, valid_values, field):
        assert schema.validate_field(field, valid_values[field.value]) is None

    def test_invalid_email(self, schema):
        assert schema.validate_field("email", "not-an-email") == "invalid email"

    def test_phone_rule(self, schema):
        assert schema.validate_field("contact", "+1 555-123-4567") is None
        assert schema.validate_field("contact", "abcd") == "Phone number is not valid"

    def test_long_invalid_contact_stays_fast(self, schema):
        start = time.perf_counter()
        message = schema.validate_field("contact", "1" * 100 + "x")
        assert message == "Phone number is not valid"
        assert time.perf_counter() - start < 1.0

    def test_accepts_plain_string_names(self, schema):
        assert schema.validate_field("firstName", "") == "required"

    def test_unknown_field(self, schema):
        with pytest.raises(UnknownFieldError):
            schema.validate_field("middleName", "x")


class TestValidateAll:
    def test_all_valid(self, schema, valid_values):
        assert schema.validate_all(valid_values) == {}

    def test_all_empty(self, schema):
        errors = schema.validate_all({name.value: "" for name in FieldName})
        assert errors == {name: "required" for name in FieldName}

    def test_missing_entries_validate_as_empty(self, schema):
        assert schema.validate_all({}) == {name: "required" for name in FieldName}

    def test_fields_fail_independently(self, schema, valid_values):
        values = dict(valid_values, email="bad", contact="abcd")
        assert schema.validate_all(values) == {
            FieldName.EMAIL: "invalid email",
            FieldName.CONTACT: "Phone number is not valid",
        }

    def test_field_errors(self, schema, valid_values):
        errors = schema.field_errors(dict(valid_values, lastName=""))
        assert len(errors) == 1
        assert errors[0].field == FieldName.LAST_NAME
        assert errors[0].message == "required"


class TestLoadDefinition:
    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "form.yml"
        path.write_text(yaml.safe_dump(_form_data()))
        defn = load_form_definition(path)
        assert defn.id == "test_form"
        assert defn.submit_label == "Submit"
        assert all(f.span == 4 for f in defn.fields)

    def test_custom_messages(self):
        data = _form_data()
        data["fields"][0]["rules"] = [{"kind": "required", "message": "First name please"}]
        schema = Schema(FormDefinition.model_validate(data))
        assert schema.validate_field("firstName", "") == "First name please"

    def test_unknown_field_rejected(self):
        data = _form_data()
        data["fields"].append({"name": "nickname", "label": "Nickname"})
        with pytest.raises(ValueError):
            FormDefinition.model_validate(data)

    def test_missing_field_rejected(self):
        data = _form_data()
        data["fields"] = data["fields"][:-1]
        with pytest.raises(ValueError, match="missing"):
            FormDefinition.model_validate(data)

    def test_duplicate_field_rejected(self):
        data = _form_data()
        data["fields"].append(dict(data["fields"][0]))
        with pytest.raises(ValueError, match="repeats"):
            FormDefinition.model_validate(data)

    def test_unknown_rule_kind_rejected(self):
        data = _form_data()
        data["fields"][0]["rules"] = [{"kind": "uppercase"}]
        with pytest.raises(ValueError):
            FormDefinition.model_validate(data)

    def test_lookaround_pattern_rejected(self):
        data = _form_data()
        data["fields"][0]["rules"] = [{"kind": "pattern", "pattern": "(?=a)a"}]
        with pytest.raises(ValueError, match="Invalid regex"):
            FormDefinition.model_validate(data)

    def test_bad_regex_rejected(self):
        data = _form_data()
        data["fields"][0]["rules"] = [{"kind": "pattern", "pattern": "(unclosed"}]
        with pytest.raises(ValueError):
            FormDefinition.model_validate(data)

    def test_non_mapping_file_rejected(self, tmp_path):
        path = tmp_path / "form.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_form_definition(path)


class TestFormRegistry:
    def test_default_registry(self, registry):
        assert "create_user" in registry.definitions

    def test_unknown_form(self, registry):
        with pytest.raises(KeyError):
            registry.get_schema("nonexistent")

    def test_custom_directory(self, tmp_path):
        (tmp_path / "a.yml").write_text(yaml.safe_dump(_form_data(id="alpha")))
        (tmp_path / "b.yml").write_text(yaml.safe_dump(_form_data(id="beta")))
        registry = FormRegistry(tmp_path)
        assert sorted(registry.definitions) == ["alpha", "beta"]

    def test_duplicate_ids_rejected(self, tmp_path):
        (tmp_path / "a.yml").write_text(yaml.safe_dump(_form_data()))
        (tmp_path / "b.yml").write_text(yaml.safe_dump(_form_data()))
        with pytest.raises(ValueError, match="Duplicate"):
            FormRegistry(tmp_path)

    def test_missing_directory_is_empty(self, tmp_path):
        registry = FormRegistry(tmp_path / "nowhere")
        assert registry.definitions == {}
