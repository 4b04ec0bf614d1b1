"""Form schema and interaction engine."""

from userform.form.engine import FormEngine, log_submission
from userform.form.registry import FormRegistry
from userform.form.schema import Schema, load_form_definition

__all__ = [
    "FormEngine",
    "FormRegistry",
    "Schema",
    "load_form_definition",
    "log_submission",
]
