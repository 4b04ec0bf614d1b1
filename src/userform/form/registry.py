"""Loads form definitions from a directory of YAML files."""

from __future__ import annotations

import logging
from pathlib import Path

from userform.form.models import FormDefinition
from userform.form.schema import Schema, load_form_definition

logger = logging.getLogger(__name__)

_DEFAULT_DEFINITIONS_DIR = Path(__file__).resolve().parent / "definitions"


class FormRegistry:
    """Form definitions keyed by id, with a Schema built for each."""

    def __init__(self, definitions_dir: str | Path | None = None) -> None:
        self._definitions_dir = (
            Path(definitions_dir) if definitions_dir else _DEFAULT_DEFINITIONS_DIR
        )
        self._schemas: dict[str, Schema] = {}
        self._load_definitions()

    def _load_definitions(self) -> None:
        if not self._definitions_dir.exists():
            logger.warning("Form definitions directory %s does not exist", self._definitions_dir)
            return
        for path in sorted(self._definitions_dir.glob("*.yml")):
            defn = load_form_definition(path)
            if defn.id in self._schemas:
                raise ValueError(f"Duplicate form id {defn.id!r} in {path}")
            self._schemas[defn.id] = Schema(defn)
            logger.debug("Loaded form definition %r from %s", defn.id, path)

    @property
    def definitions(self) -> dict[str, FormDefinition]:
        return {form_id: schema.definition for form_id, schema in self._schemas.items()}

    def get_schema(self, form_id: str) -> Schema:
        """Return the Schema for a form.

        Raises:
            KeyError: If form_id is not found.
        """
        schema = self._schemas.get(form_id)
        if schema is None:
            raise KeyError(f"Unknown form: {form_id!r}")
        return schema
