"""FastAPI router that lets a browser UI drive form sessions."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from userform.form.engine import FormEngine
from userform.form.models import FormSnapshot
from userform.form.schema import Schema
from userform.form.store import FormSession

router = APIRouter()


# --- Request/Response models ---


class FormSummary(BaseModel):
    id: str
    title: str
    subtitle: str
    fields: int


class FieldLayout(BaseModel):
    name: str
    label: str
    span: int


class FormLayoutResponse(BaseModel):
    id: str
    title: str
    subtitle: str
    submit_label: str
    fields: list[FieldLayout]


class SessionResponse(FormSnapshot):
    session_id: str
    created_at: str
    submitted_at: str | None = None


class SetValueRequest(BaseModel):
    value: str


class SubmitResponse(BaseModel):
    submitted: bool
    values: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
    session: SessionResponse


# --- Helpers ---


def _get_session(request: Request, session_id: str) -> FormSession:
    session = request.app.state.form_store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Form session {session_id!r} not found")
    return session


def _get_schema(request: Request, form_id: str) -> Schema:
    try:
        return request.app.state.form_registry.get_schema(form_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _session_response(session: FormSession) -> SessionResponse:
    snapshot = session.engine.snapshot()
    return SessionResponse(
        session_id=session.session_id,
        created_at=session.created_at.isoformat(),
        submitted_at=session.submitted_at.isoformat() if session.submitted_at else None,
        **snapshot.model_dump(),
    )


# --- Form definition endpoints ---


@router.get("/api/forms")
async def list_forms(request: Request) -> list[FormSummary]:
    registry = request.app.state.form_registry
    return [
        FormSummary(
            id=defn.id,
            title=defn.title,
            subtitle=defn.subtitle,
            fields=len(defn.fields),
        )
        for defn in registry.definitions.values()
    ]


@router.get("/api/forms/{form_id}")
async def get_form_layout(form_id: str, request: Request) -> FormLayoutResponse:
    defn = _get_schema(request, form_id).definition

    return FormLayoutResponse(
        id=defn.id,
        title=defn.title,
        subtitle=defn.subtitle,
        submit_label=defn.submit_label,
        fields=[
            FieldLayout(name=f.name.value, label=f.label, span=f.span)
            for f in defn.fields
        ],
    )


# --- Session endpoints ---


def _start_session(request: Request, form_id: str) -> SessionResponse:
    engine = FormEngine(
        _get_schema(request, form_id), on_submit=request.app.state.submit_handler
    )
    session = request.app.state.form_store.create(engine)
    return _session_response(session)


@router.post("/api/forms/{form_id}/sessions")
async def start_session(form_id: str, request: Request) -> SessionResponse:
    return _start_session(request, form_id)


@router.post("/api/sessions")
async def start_default_session(request: Request) -> SessionResponse:
    """Start a session on the configured default form."""
    return _start_session(request, request.app.state.settings.forms.default_form)


@router.get("/api/forms/{form_id}/sessions")
async def list_sessions(form_id: str, request: Request) -> list[SessionResponse]:
    _get_schema(request, form_id)
    store = request.app.state.form_store
    return [_session_response(s) for s in store.list_sessions(form_id)]


@router.get("/api/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> SessionResponse:
    return _session_response(_get_session(request, session_id))


@router.delete("/api/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    if not request.app.state.form_store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Form session {session_id!r} not found")
    return Response(status_code=204)


@router.put("/api/sessions/{session_id}/fields/{field}")
async def set_field_value(
    session_id: str, field: str, body: SetValueRequest, request: Request
) -> SessionResponse:
    session = _get_session(request, session_id)
    try:
        session.engine.set_value(field, body.value)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _session_response(session)


@router.post("/api/sessions/{session_id}/fields/{field}/touch")
async def touch_field(session_id: str, field: str, request: Request) -> SessionResponse:
    session = _get_session(request, session_id)
    try:
        session.engine.touch(field)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _session_response(session)


@router.post("/api/sessions/{session_id}/submit")
async def submit_session(session_id: str, request: Request) -> SubmitResponse:
    session = _get_session(request, session_id)
    result = session.engine.submit()

    errors: dict[str, str] = {}
    if result.blocked is not None:
        errors = {e.field.value: e.message for e in result.blocked.errors}
    else:
        session.submitted_at = datetime.now(timezone.utc)

    return SubmitResponse(
        submitted=result.submitted,
        values=result.values,
        errors=errors,
        session=_session_response(session),
    )


@router.post("/api/sessions/{session_id}/reset")
async def reset_session(session_id: str, request: Request) -> SessionResponse:
    session = _get_session(request, session_id)
    session.engine.reset()
    session.submitted_at = None
    return _session_response(session)
