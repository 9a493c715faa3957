"""List-page UI state, carried entirely in the query string."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from urllib.parse import urlencode

from tracker.models.incident import Severity, Status
from tracker.schemas.incident import SortField

# (sort key, header label) in table order
COLUMNS = [
    ("title", "Title"),
    ("service", "Service"),
    ("severity", "Severity"),
    ("status", "Status"),
    ("owner", "Owner"),
    ("createdAt", "Created"),
]

_SORT_KEYS = {field.value for field in SortField}


@dataclass(frozen=True)
class ListState:
    page: int = 1
    limit: int = 10
    search: str = ""
    service: str = ""
    severity: str = ""
    status: str = ""
    sort_by: str = SortField.CREATED_AT.value
    sort_order: str = "desc"

    @classmethod
    def from_query(cls, query: Mapping[str, str], limit: int = 10) -> "ListState":
        try:
            page = max(int(query.get("page", 1)), 1)
        except (TypeError, ValueError):
            page = 1

        severity = query.get("severity", "")
        status = query.get("status", "")
        sort_by = query.get("sortBy", "")
        return cls(
            page=page,
            limit=limit,
            search=query.get("search", "").strip(),
            service=query.get("service", "").strip(),
            severity=severity if severity in Severity.__members__ else "",
            status=status if status in Status.__members__ else "",
            sort_by=sort_by if sort_by in _SORT_KEYS else SortField.CREATED_AT.value,
            sort_order="asc" if query.get("sortOrder") == "asc" else "desc",
        )

    def api_params(self) -> dict:
        params = {
            "page": self.page,
            "limit": self.limit,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }
        for key in ("search", "service", "severity", "status"):
            value = getattr(self, key)
            if value:
                params[key] = value
        return params

    def query_string(self) -> str:
        params = self.api_params()
        params.pop("limit")
        if params["page"] == 1:
            params.pop("page")
        return urlencode(params)

    def url(self) -> str:
        query = self.query_string()
        return f"/?{query}" if query else "/"

    def sort_url(self, field: str) -> str:
        """Clicking the active column flips direction; any other column starts descending."""
        if field == self.sort_by:
            order = "asc" if self.sort_order == "desc" else "desc"
        else:
            order = "desc"
        return replace(self, sort_by=field, sort_order=order).url()

    def page_url(self, page: int) -> str:
        return replace(self, page=page).url()
