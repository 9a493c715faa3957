import logging
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from tracker.config import Settings
from tracker.services.incidents_client import IncidentsClient, IncidentsClientError
from tracker.utils.deps import get_settings
from tracker.web.constants import (
    NOTICES,
    SEVERITY_OPTIONS,
    STATUS_OPTIONS,
    severity_color,
    status_color,
    status_label,
)
from tracker.web.state import COLUMNS, ListState

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

FORM_FIELDS = ("title", "service", "severity", "status", "owner", "summary")
OPTIONAL_FIELDS = ("owner", "summary")


def format_timestamp(value: str | None) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%b %d, %Y, %H:%M UTC")


templates.env.filters["timestamp"] = format_timestamp
templates.env.globals.update(
    severity_color=severity_color,
    status_color=status_color,
    status_label=status_label,
    severity_options=SEVERITY_OPTIONS,
    status_options=STATUS_OPTIONS,
)


def get_incidents_client(request: Request) -> IncidentsClient:
    return request.app.state.incidents_client


def _notice(request: Request):
    return NOTICES.get(request.query_params.get("notice", ""))


def _is_partial(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true" and request.headers.get("HX-Boosted") != "true"


def form_payload(form, clear_blank_optional: bool) -> dict:
    """Turn submitted form fields into an API body.

    Blank optional fields are omitted on create and sent as null on edit so
    they get cleared.
    """
    payload = {}
    for name in FORM_FIELDS:
        value = (form.get(name) or "").strip()
        if name in OPTIONAL_FIELDS:
            if value:
                payload[name] = value
            elif clear_blank_optional:
                payload[name] = None
        elif name == "status" and not value and not clear_blank_optional:
            continue
        else:
            payload[name] = value
    return payload


def _error_page(request: Request, exc: IncidentsClientError):
    if exc.status_code == 404:
        return templates.TemplateResponse(
            request, "error.html",
            {"title": "Incident not found", "message": exc.message, "notice": None},
            status_code=404,
        )
    return templates.TemplateResponse(
        request, "error.html",
        {"title": "Something went wrong", "message": exc.message, "notice": None},
        status_code=502,
    )


@router.get("/", response_class=HTMLResponse)
async def incident_list(
    request: Request,
    client: IncidentsClient = Depends(get_incidents_client),
    settings: Settings = Depends(get_settings),
):
    state = ListState.from_query(request.query_params, limit=settings.default_page_size)
    result = None
    error = None
    try:
        result = await client.list(state.api_params())
    except IncidentsClientError as e:
        logger.warning("Failed to load incident list: %s", e)
        error = e.message

    context = {
        "state": state,
        "columns": COLUMNS,
        "result": result,
        "error": error,
        "notice": _notice(request),
        "debounce_ms": settings.search_debounce_ms,
    }
    template = "partials/incident_table.html" if _is_partial(request) else "incident_list.html"
    return templates.TemplateResponse(request, template, context)


@router.get("/incidents/new", response_class=HTMLResponse)
async def new_incident_form(request: Request):
    return templates.TemplateResponse(
        request, "incident_new.html",
        {"values": {"status": "OPEN"}, "errors": {}, "notice": None},
    )


@router.post("/incidents/new", response_class=HTMLResponse)
async def create_incident(request: Request, client: IncidentsClient = Depends(get_incidents_client)):
    form = await request.form()
    payload = form_payload(form, clear_blank_optional=False)
    try:
        await client.create(payload)
    except IncidentsClientError as e:
        if e.status_code != 400:
            logger.warning("Failed to create incident: %s", e)
        return templates.TemplateResponse(
            request, "incident_new.html",
            {
                "values": {name: form.get(name, "") for name in FORM_FIELDS},
                "errors": e.field_errors,
                "notice": ("error", f"Error creating incident: {e.message}"),
            },
            status_code=400 if e.status_code == 400 else 502,
        )
    return RedirectResponse(url="/?notice=created", status_code=303)


@router.get("/incidents/{incident_id}", response_class=HTMLResponse)
async def incident_detail(
    incident_id: str,
    request: Request,
    client: IncidentsClient = Depends(get_incidents_client),
):
    try:
        incident = await client.get(incident_id)
    except IncidentsClientError as e:
        return _error_page(request, e)

    return templates.TemplateResponse(
        request, "incident_detail.html",
        {"incident": incident, "values": incident, "errors": {}, "notice": _notice(request)},
    )


@router.post("/incidents/{incident_id}", response_class=HTMLResponse)
async def update_incident(
    incident_id: str,
    request: Request,
    client: IncidentsClient = Depends(get_incidents_client),
):
    form = await request.form()
    payload = form_payload(form, clear_blank_optional=True)
    try:
        await client.update(incident_id, payload)
    except IncidentsClientError as e:
        if e.status_code != 400:
            return _error_page(request, e)
        try:
            incident = await client.get(incident_id)
        except IncidentsClientError as lookup_error:
            return _error_page(request, lookup_error)
        return templates.TemplateResponse(
            request, "incident_detail.html",
            {
                "incident": incident,
                "values": {name: form.get(name, "") for name in FORM_FIELDS},
                "errors": e.field_errors,
                "notice": ("error", f"Error updating incident: {e.message}"),
            },
            status_code=400,
        )
    return RedirectResponse(url=f"/incidents/{incident_id}?notice=updated", status_code=303)


@router.post("/incidents/{incident_id}/delete")
async def delete_incident(
    incident_id: str,
    request: Request,
    client: IncidentsClient = Depends(get_incidents_client),
):
    try:
        await client.delete(incident_id)
    except IncidentsClientError as e:
        if e.status_code == 404:
            return _error_page(request, e)
        logger.warning("Failed to delete incident %s: %s", incident_id, e)
        return RedirectResponse(url=f"/incidents/{incident_id}?notice=delete-failed", status_code=303)
    return RedirectResponse(url="/?notice=deleted", status_code=303)
