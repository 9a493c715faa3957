import pytest
from pydantic import ValidationError

from tracker.models.incident import Severity, Status
from tracker.schemas.incident import IncidentListParams, SortField
from tracker.services.query_builder import build_query


def test_defaults_sort_newest_first():
    query = build_query(IncidentListParams())

    assert query.sort_field == SortField.CREATED_AT
    assert query.descending is True
    assert query.page == 1
    assert query.limit == 10
    assert query.offset == 0
    assert query.search is None
    assert query.severity is None
    assert query.status is None
    assert query.service is None


def test_offset_is_derived_from_page_and_limit():
    query = build_query(IncidentListParams(page=3, limit=25))

    assert query.offset == 50
    assert query.limit == 25


def test_text_filters_are_trimmed_and_blank_dropped():
    params = IncidentListParams.model_validate({"search": "  payment ", "service": "   "})
    query = build_query(params)

    assert query.search == "payment"
    assert query.service is None


def test_query_string_values_are_parsed():
    params = IncidentListParams.model_validate({
        "page": "2",
        "limit": "5",
        "severity": "SEV1",
        "status": "MITIGATED",
        "sortBy": "title",
        "sortOrder": "asc",
    })
    query = build_query(params)

    assert query.severity == Severity.SEV1
    assert query.status == Status.MITIGATED
    assert query.sort_field == SortField.TITLE
    assert query.descending is False
    assert query.offset == 5


def test_empty_enum_filters_are_ignored():
    params = IncidentListParams.model_validate({"severity": "", "status": ""})

    assert params.severity is None
    assert params.status is None


@pytest.mark.parametrize(
    "raw",
    [
        {"severity": "SEV9"},
        {"status": "CLOSED"},
        {"sortBy": "password"},
        {"sortOrder": "sideways"},
        {"page": "0"},
        {"limit": "0"},
        {"page": "abc"},
        {"page": "1000001"},
    ],
)
def test_invalid_params_are_rejected(raw):
    with pytest.raises(ValidationError):
        IncidentListParams.model_validate(raw)


def test_limit_is_capped_by_context():
    with pytest.raises(ValidationError):
        IncidentListParams.model_validate({"limit": "101"}, context={"max_page_size": 100})

    params = IncidentListParams.model_validate({"limit": "100"}, context={"max_page_size": 100})
    assert params.limit == 100
