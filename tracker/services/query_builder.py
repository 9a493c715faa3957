"""Translate validated list parameters into a storage-agnostic query description."""

from dataclasses import dataclass

from tracker.models.incident import Severity, Status
from tracker.schemas.incident import IncidentListParams, SortField, SortOrder


@dataclass(frozen=True)
class IncidentQuery:
    search: str | None
    severity: Severity | None
    status: Status | None
    service: str | None
    sort_field: SortField
    descending: bool
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_query(params: IncidentListParams) -> IncidentQuery:
    return IncidentQuery(
        search=_clean(params.search),
        severity=params.severity,
        status=params.status,
        service=_clean(params.service),
        sort_field=params.sort_by,
        descending=params.sort_order == SortOrder.DESC,
        page=params.page,
        limit=params.limit,
    )
