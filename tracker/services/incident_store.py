import logging
from collections.abc import Mapping
from dataclasses import dataclass
from math import ceil

from pydantic import ValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from tracker.models.incident import Incident
from tracker.schemas.incident import (
    IncidentCreate,
    IncidentListParams,
    IncidentUpdate,
    SortField,
    StrictIncidentCreate,
    StrictIncidentUpdate,
    format_errors,
)
from tracker.services.query_builder import IncidentQuery, build_query
from tracker.services.results import NotFound, Ok, StoreFailure, StoreResult, ValidationFailed
from tracker.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    SortField.ID: Incident.id,
    SortField.TITLE: Incident.title,
    SortField.SERVICE: Incident.service,
    SortField.SEVERITY: Incident.severity,
    SortField.STATUS: Incident.status,
    SortField.OWNER: Incident.owner,
    SortField.SUMMARY: Incident.summary,
    SortField.CREATED_AT: Incident.created_at,
    SortField.UPDATED_AT: Incident.updated_at,
}


@dataclass(frozen=True)
class IncidentPage:
    items: list[Incident]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit)


def _contains(column, term: str):
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def apply_filters(stmt, query: IncidentQuery):
    if query.search:
        stmt = stmt.where(or_(
            _contains(Incident.title, query.search),
            _contains(Incident.service, query.search),
            _contains(Incident.owner, query.search),
        ))
    if query.severity:
        stmt = stmt.where(Incident.severity == query.severity)
    if query.status:
        stmt = stmt.where(Incident.status == query.status)
    if query.service:
        stmt = stmt.where(_contains(Incident.service, query.service))
    return stmt


def apply_ordering(stmt, query: IncidentQuery):
    column = SORT_COLUMNS[query.sort_field]
    if query.descending:
        return stmt.order_by(column.desc(), Incident.id.desc())
    return stmt.order_by(column.asc(), Incident.id.asc())


def create_incident(db: DBSession, fields: Mapping, strict: bool = True) -> StoreResult:
    schema = StrictIncidentCreate if strict else IncidentCreate
    try:
        data = schema.model_validate(fields)
    except ValidationError as exc:
        errors = format_errors(exc)
        logger.info("Rejected incident create: %d validation error(s)", len(errors))
        return ValidationFailed(errors)

    now = utcnow()
    incident = Incident(**data.model_dump(), created_at=now, updated_at=now)
    db.add(incident)
    try:
        db.commit()
        db.refresh(incident)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create incident")
        return StoreFailure("Failed to save incident")

    logger.info("Created incident %s (%s, %s)", incident.id, incident.severity.value, incident.service)
    return Ok(incident)


def list_incidents(db: DBSession, params: IncidentListParams) -> StoreResult:
    query = build_query(params)
    stmt = apply_filters(select(Incident), query)
    try:
        total = db.scalar(select(func.count()).select_from(stmt.subquery()))
        items = db.scalars(
            apply_ordering(stmt, query).offset(query.offset).limit(query.limit)
        ).all()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to list incidents")
        return StoreFailure("Failed to list incidents")

    return Ok(IncidentPage(items=list(items), total=total, page=query.page, limit=query.limit))


def get_incident(db: DBSession, incident_id: str) -> StoreResult:
    try:
        incident = db.get(Incident, incident_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load incident %s", incident_id)
        return StoreFailure("Failed to load incident")

    if incident is None:
        return NotFound(incident_id)
    return Ok(incident)


def update_incident(db: DBSession, incident_id: str, fields: Mapping, strict: bool = True) -> StoreResult:
    schema = StrictIncidentUpdate if strict else IncidentUpdate
    try:
        changes = schema.model_validate(fields).model_dump(exclude_unset=True)
    except ValidationError as exc:
        errors = format_errors(exc)
        logger.info("Rejected update of incident %s: %d validation error(s)", incident_id, len(errors))
        return ValidationFailed(errors)

    found = get_incident(db, incident_id)
    if not isinstance(found, Ok):
        return found

    incident = found.value
    for key, value in changes.items():
        setattr(incident, key, value)
    incident.updated_at = utcnow()
    try:
        db.commit()
        db.refresh(incident)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update incident %s", incident_id)
        return StoreFailure("Failed to update incident")

    logger.info("Updated incident %s: %s", incident_id, ", ".join(sorted(changes)) or "no fields")
    return Ok(incident)


def remove_incident(db: DBSession, incident_id: str) -> StoreResult:
    found = get_incident(db, incident_id)
    if not isinstance(found, Ok):
        return found

    incident = found.value
    db.delete(incident)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete incident %s", incident_id)
        return StoreFailure("Failed to delete incident")

    logger.info("Deleted incident %s", incident_id)
    return Ok(incident)
