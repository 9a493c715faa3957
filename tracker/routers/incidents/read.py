from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DBSession

from tracker.database import get_db
from tracker.routers.incidents.common import serialize_incident, serialize_page, unwrap
from tracker.schemas.incident import IncidentListParams
from tracker.services import incident_store
from tracker.utils.deps import get_list_params

router = APIRouter()


@router.get("/incidents")
async def list_incidents(
    params: IncidentListParams = Depends(get_list_params),
    db: DBSession = Depends(get_db),
):
    page = unwrap(incident_store.list_incidents(db, params))
    return serialize_page(page)


@router.get("/incidents/{incident_id}")
async def get_incident(incident_id: str, db: DBSession = Depends(get_db)):
    incident = unwrap(incident_store.get_incident(db, incident_id))
    return serialize_incident(incident)
