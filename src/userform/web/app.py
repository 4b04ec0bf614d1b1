"""FastAPI application serving the Create User form engine.

The HTTP layer is a presentation adapter: it exposes form layouts and lets a
browser UI drive per-client form sessions through set/touch/submit/reset.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from userform.core.config import Settings
from userform.form.engine import SubmitHandler, log_submission
from userform.form.registry import FormRegistry
from userform.form.store import FormSessionStore
from userform.web.form_router import router as form_router


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = "0.1.0"
    forms: list[str]
    default_form: str


# --- Application factory ---


def create_app(
    settings: Settings | None = None,
    registry: FormRegistry | None = None,
    submit_handler: SubmitHandler | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with their own registry and submit handler.

    Args:
        settings: Application settings. Defaults to Settings().
            The configured default form must exist in the registry.
        registry: Optional pre-built FormRegistry.
        submit_handler: Called with the values of every successful submit.
            Defaults to logging them.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("userform").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="userform",
        description="Create User form validation engine",
        version="0.1.0",
        debug=settings.debug,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if registry is None:
        registry = FormRegistry(settings.forms.definitions_dir)

    default_form = settings.forms.default_form
    if default_form not in registry.definitions:
        raise ValueError(
            f"Default form {default_form!r} is not defined. "
            f"Available forms: {sorted(registry.definitions)}"
        )

    app.state.settings = settings
    app.state.form_registry = registry
    app.state.form_store = FormSessionStore(
        session_expiry_minutes=settings.forms.session_expiry_minutes,
    )
    app.state.submit_handler = submit_handler or log_submission

    app.include_router(form_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="userform",
            forms=sorted(registry.definitions),
            default_form=default_form,
        )

    return app
