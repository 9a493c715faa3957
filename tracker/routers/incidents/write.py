from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session as DBSession

from tracker.config import Settings
from tracker.database import get_db
from tracker.routers.incidents.common import serialize_incident, unwrap
from tracker.services import incident_store
from tracker.utils.deps import get_settings

router = APIRouter()


@router.post("/incidents", status_code=201)
async def create_incident(
    body: dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
    db: DBSession = Depends(get_db),
):
    result = incident_store.create_incident(db, body, strict=settings.forbid_unknown_fields)
    return serialize_incident(unwrap(result))


@router.patch("/incidents/{incident_id}")
async def update_incident(
    incident_id: str,
    body: dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
    db: DBSession = Depends(get_db),
):
    result = incident_store.update_incident(db, incident_id, body, strict=settings.forbid_unknown_fields)
    return serialize_incident(unwrap(result))


@router.delete("/incidents/{incident_id}")
async def delete_incident(incident_id: str, db: DBSession = Depends(get_db)):
    incident = unwrap(incident_store.remove_incident(db, incident_id))
    return serialize_incident(incident)
