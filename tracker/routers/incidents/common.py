from fastapi import HTTPException

from tracker.models.incident import Incident
from tracker.services.incident_store import IncidentPage
from tracker.services.results import NotFound, Ok, StoreResult, ValidationFailed
from tracker.utils.timestamps import to_iso


def serialize_incident(incident: Incident) -> dict:
    return {
        "id": incident.id,
        "title": incident.title,
        "service": incident.service,
        "severity": incident.severity.value,
        "status": incident.status.value,
        "owner": incident.owner,
        "summary": incident.summary,
        "createdAt": to_iso(incident.created_at),
        "updatedAt": to_iso(incident.updated_at),
    }


def serialize_page(page: IncidentPage) -> dict:
    return {
        "data": [serialize_incident(incident) for incident in page.items],
        "meta": {
            "page": page.page,
            "limit": page.limit,
            "total": page.total,
            "totalPages": page.total_pages,
        },
    }


def unwrap(result: StoreResult):
    """Return the value of an Ok result, or raise the matching HTTP error."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, NotFound):
        raise HTTPException(status_code=404, detail=f"Incident with ID {result.incident_id} not found")
    if isinstance(result, ValidationFailed):
        raise HTTPException(status_code=400, detail=result.errors)
    raise HTTPException(status_code=500, detail="Internal server error")
