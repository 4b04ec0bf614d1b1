"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class FormsConfig(BaseSettings):
    """Form definition and session configuration."""

    model_config = {"env_prefix": "USERFORM_FORMS_"}

    definitions_dir: str | None = None
    default_form: str = "create_user"
    session_expiry_minutes: int = 60


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "USERFORM_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    forms: FormsConfig = Field(default_factory=FormsConfig)
