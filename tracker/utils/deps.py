from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from tracker.config import Settings
from tracker.schemas.incident import IncidentListParams, format_errors


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_list_params(request: Request, settings: Settings = Depends(get_settings)) -> IncidentListParams:
    raw = dict(request.query_params)
    raw.setdefault("limit", settings.default_page_size)
    try:
        return IncidentListParams.model_validate(raw, context={"max_page_size": settings.max_page_size})
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ["query", *error["loc"]]} for error in format_errors(exc)]
        )
