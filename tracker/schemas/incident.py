"""Request models for the incident API.

Create/update bodies come in a lenient flavour, which silently drops fields
outside the schema, and a strict one that rejects them. The store picks one
according to the ``forbid_unknown_fields`` setting.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from tracker.models.incident import Severity, Status

# Fields the server owns. Clients echoing a full record back on edit get these dropped.
READ_ONLY_FIELDS = ("id", "createdAt", "updatedAt")

# Keeps (page - 1) * limit inside a 64-bit offset
MAX_PAGE = 1_000_000


class SortField(str, enum.Enum):
    ID = "id"
    TITLE = "title"
    SERVICE = "service"
    SEVERITY = "severity"
    STATUS = "status"
    OWNER = "owner"
    SUMMARY = "summary"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class IncidentCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1, max_length=255)
    service: str = Field(min_length=1, max_length=100)
    severity: Severity
    status: Status = Status.OPEN
    owner: str | None = Field(default=None, max_length=255)
    summary: str | None = Field(default=None, max_length=1000)


class StrictIncidentCreate(IncidentCreate):
    model_config = ConfigDict(extra="forbid")


class IncidentUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    service: str | None = Field(default=None, min_length=1, max_length=100)
    severity: Severity | None = None
    status: Status | None = None
    owner: str | None = Field(default=None, max_length=255)
    summary: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="before")
    @classmethod
    def drop_read_only_fields(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in READ_ONLY_FIELDS}
        return data

    @field_validator("title", "service", "severity", "status")
    @classmethod
    def reject_null(cls, value):
        # owner and summary may be cleared, the rest are required columns
        if value is None:
            raise ValueError("may not be null")
        return value


class StrictIncidentUpdate(IncidentUpdate):
    model_config = ConfigDict(extra="forbid")


class IncidentListParams(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    limit: int = Field(default=10, ge=1)
    search: str | None = Field(default=None, max_length=255)
    severity: Severity | None = None
    status: Status | None = None
    service: str | None = Field(default=None, max_length=100)
    sort_by: SortField = Field(default=SortField.CREATED_AT, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")

    @field_validator("search", "severity", "status", "service", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, value, info):
        max_page_size = (info.context or {}).get("max_page_size")
        if max_page_size is not None and value > max_page_size:
            raise ValueError(f"must be less than or equal to {max_page_size}")
        return value


def format_errors(exc: ValidationError) -> list[dict]:
    """Reduce pydantic errors to JSON-safe ``{loc, msg, type}`` entries."""
    return [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
