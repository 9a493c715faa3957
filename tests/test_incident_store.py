from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from tracker.models.incident import Incident, Severity, Status
from tracker.schemas.incident import MAX_PAGE, IncidentListParams
from tracker.services import incident_store
from tracker.services.results import NotFound, Ok, ValidationFailed


def _count(db):
    return db.scalar(select(func.count()).select_from(Incident))


def _create(db, **overrides):
    fields = {"title": "Disk space critical", "service": "Storage Service", "severity": "SEV2"}
    fields.update(overrides)
    result = incident_store.create_incident(db, fields)
    assert isinstance(result, Ok), result
    return result.value


def test_create_sets_id_timestamps_and_default_status(db):
    incident = _create(db)

    assert incident.id
    assert incident.status == Status.OPEN
    assert incident.severity == Severity.SEV2
    assert incident.created_at == incident.updated_at


def test_create_without_title_persists_nothing(db):
    result = incident_store.create_incident(db, {"service": "Database", "severity": "SEV1"})

    assert isinstance(result, ValidationFailed)
    assert ["title"] in [error["loc"] for error in result.errors]
    assert _count(db) == 0


def test_create_with_unknown_severity_persists_nothing(db):
    result = incident_store.create_incident(db, {"title": "x", "service": "Database", "severity": "SEV5"})

    assert isinstance(result, ValidationFailed)
    assert _count(db) == 0


def test_create_enforces_length_limits(db):
    result = incident_store.create_incident(
        db, {"title": "t" * 256, "service": "s" * 101, "severity": "SEV1", "summary": "x" * 1001}
    )

    assert isinstance(result, ValidationFailed)
    assert {tuple(error["loc"]) for error in result.errors} == {("title",), ("service",), ("summary",)}


def test_unknown_fields_rejected_when_strict_and_dropped_otherwise(db):
    fields = {"title": "x", "service": "Database", "severity": "SEV1", "priority": "high"}

    assert isinstance(incident_store.create_incident(db, fields, strict=True), ValidationFailed)

    result = incident_store.create_incident(db, fields, strict=False)
    assert isinstance(result, Ok)
    assert not hasattr(result.value, "priority")


def test_update_changes_only_supplied_fields(db):
    incident = _create(db, owner="mike@example.com", summary="Cleanup required.")
    created_at = incident.created_at

    result = incident_store.update_incident(db, incident.id, {"status": "RESOLVED"})

    assert isinstance(result, Ok)
    updated = result.value
    assert updated.status == Status.RESOLVED
    assert updated.title == "Disk space critical"
    assert updated.owner == "mike@example.com"
    assert updated.summary == "Cleanup required."
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_update_null_clears_optional_field_but_not_required_one(db):
    incident = _create(db, owner="emma@example.com")

    result = incident_store.update_incident(db, incident.id, {"owner": None})
    assert isinstance(result, Ok)
    assert result.value.owner is None

    result = incident_store.update_incident(db, incident.id, {"title": None})
    assert isinstance(result, ValidationFailed)


def test_update_discards_read_only_fields(db):
    incident = _create(db)
    original_id = incident.id

    result = incident_store.update_incident(
        db, incident.id,
        {"id": "something-else", "createdAt": "2000-01-01T00:00:00Z", "updatedAt": "x", "severity": "SEV4"},
    )

    assert isinstance(result, Ok)
    assert result.value.id == original_id
    assert result.value.severity == Severity.SEV4


def test_update_and_remove_missing_id_return_not_found(db):
    _create(db)

    assert isinstance(incident_store.update_incident(db, "missing", {"status": "RESOLVED"}), NotFound)
    assert isinstance(incident_store.remove_incident(db, "missing"), NotFound)
    assert isinstance(incident_store.get_incident(db, "missing"), NotFound)
    assert _count(db) == 1


def test_remove_deletes_and_returns_record(db):
    incident = _create(db)

    result = incident_store.remove_incident(db, incident.id)

    assert isinstance(result, Ok)
    assert result.value.id == incident.id
    assert _count(db) == 0


def test_list_search_matches_title_service_or_owner(db):
    _create(db, title="Payment processing errors", service="Billing")
    _create(db, title="Slow query performance", service="payment service")
    _create(db, title="Memory leak detected", service="Cache Layer", owner="PAYMENTS-oncall@example.com")
    _create(db, title="SSL certificate expiring", service="Auth Service", summary="payment unaffected")

    result = incident_store.list_incidents(db, IncidentListParams(search="payment"))

    assert isinstance(result, Ok)
    titles = {incident.title for incident in result.value.items}
    assert titles == {"Payment processing errors", "Slow query performance", "Memory leak detected"}
    assert result.value.total == 3


def test_list_filters_combine(db):
    _create(db, service="Payment Service", severity="SEV1", status="OPEN")
    _create(db, service="Payment Service", severity="SEV1", status="RESOLVED")
    _create(db, service="Email Service", severity="SEV1", status="OPEN")
    _create(db, service="Payment Service", severity="SEV3", status="OPEN")

    params = IncidentListParams(service="payment", severity=Severity.SEV1, status=Status.OPEN)
    result = incident_store.list_incidents(db, params)

    assert result.value.total == 1
    item = result.value.items[0]
    assert (item.service, item.severity, item.status) == ("Payment Service", Severity.SEV1, Status.OPEN)


def test_list_search_treats_wildcards_literally(db):
    _create(db, title="100% CPU on worker")
    _create(db, title="1000 CPU seconds")

    result = incident_store.list_incidents(db, IncidentListParams(search="100%"))

    assert [incident.title for incident in result.value.items] == ["100% CPU on worker"]


def test_list_paginates(db):
    for i in range(25):
        _create(db, title=f"Incident {i:02d}")

    params = IncidentListParams.model_validate({"page": 2, "limit": 10, "sortBy": "title", "sortOrder": "asc"})
    result = incident_store.list_incidents(db, params)

    page = result.value
    assert [incident.title for incident in page.items] == [f"Incident {i:02d}" for i in range(10, 20)]
    assert page.total == 25
    assert page.total_pages == 3


def test_list_defaults_to_newest_first(db):
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    for days_ago, title in [(3, "oldest"), (0, "newest"), (1, "middle")]:
        created_at = now - timedelta(days=days_ago)
        db.add(Incident(title=title, service="Database", severity=Severity.SEV3, created_at=created_at, updated_at=created_at))
    db.commit()

    result = incident_store.list_incidents(db, IncidentListParams())

    assert [incident.title for incident in result.value.items] == ["newest", "middle", "oldest"]


def test_list_empty_store_has_zero_pages(db):
    result = incident_store.list_incidents(db, IncidentListParams())

    assert result.value.items == []
    assert result.value.total == 0
    assert result.value.total_pages == 0


def test_list_highest_allowed_page_is_empty_not_an_error(db):
    _create(db)

    params = IncidentListParams.model_validate({"page": MAX_PAGE, "limit": 100})
    result = incident_store.list_incidents(db, params)

    assert isinstance(result, Ok)
    assert result.value.items == []
    assert result.value.total == 1
