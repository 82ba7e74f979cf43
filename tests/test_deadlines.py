from __future__ import annotations

from datetime import date

import pytest

from src.io.catalog_store import CatalogStore
from src.match.deadlines import (
    deadline_calendar,
    deadline_message,
    get_scholarship_deadline,
    is_urgent,
    list_deadlines,
    urgency_level,
)
from src.match.errors import ScholarshipNotFoundError

TODAY = date(2026, 2, 22)


def _store() -> CatalogStore:
    return CatalogStore.from_records(
        scholarships=[
            {"id": "a", "name": "Zeta Grant", "provider_type": "NGO", "application_deadline": "2026-02-22"},
            {"id": "b", "name": "Alpha Grant", "provider_type": "Government", "application_deadline": "2026-02-25"},
            {"id": "c", "name": "Mu Grant", "provider_type": "Government", "application_deadline": "2026-03-05"},
            {"id": "d", "name": "Beta Grant", "provider_type": "Private", "application_deadline": "2026-03-20"},
            {
                "id": "e",
                "name": "Omega Grant",
                "provider_type": "LGU",
                "application_start": "2026-03-01",
                "application_deadline": "2026-06-30",
            },
            {"id": "old", "name": "Old Grant", "application_deadline": "2026-01-15"},
        ]
    )


@pytest.mark.parametrize(
    ("days", "level"),
    [
        (0, "last_day"),
        (1, "critical"),
        (3, "critical"),
        (4, "very_urgent"),
        (7, "very_urgent"),
        (14, "urgent"),
        (15, "soon"),
        (30, "soon"),
        (31, "normal"),
        (-1, None),
        (None, None),
    ],
)
def test_urgency_level_thresholds(days: int | None, level: str | None) -> None:
    assert urgency_level(days) == level


def test_is_urgent_window() -> None:
    assert is_urgent(0)
    assert is_urgent(14)
    assert not is_urgent(15)
    assert not is_urgent(-2)
    assert not is_urgent(None)


def test_deadline_message_pluralizes() -> None:
    assert deadline_message(1, "critical") == "CRITICAL: Only 1 day left! Apply immediately!"
    assert deadline_message(None, None) == "Deadline has passed."
    assert deadline_message(45, "normal") == "45 days until deadline."


def test_list_deadlines_orders_by_deadline_and_summarizes_page() -> None:
    listing = list_deadlines(_store(), today=TODAY)

    assert [entry["id"] for entry in listing["deadlines"]] == ["a", "b", "c", "d", "e"]
    assert listing["server_date"] == "2026-02-22"
    assert listing["summary"] == {
        "total": 5,
        "critical": 2,
        "urgent": 3,
        "closing_this_week": 2,
        "closing_this_month": 4,
    }
    assert listing["deadlines"][0]["message"].startswith("LAST DAY")


def test_list_deadlines_filters_sorts_and_paginates() -> None:
    urgent = list_deadlines(_store(), today=TODAY, urgent_only=True)
    assert [entry["id"] for entry in urgent["deadlines"]] == ["a", "b", "c"]

    government = list_deadlines(_store(), today=TODAY, provider_type="Government")
    assert [entry["id"] for entry in government["deadlines"]] == ["b", "c"]

    by_name = list_deadlines(_store(), today=TODAY, sort_by="name", limit=2, offset=1)
    assert [entry["name"] for entry in by_name["deadlines"]] == ["Beta Grant", "Mu Grant"]
    assert by_name["pagination"] == {"total": 5, "limit": 2, "offset": 1, "has_more": True}


def test_list_deadlines_rejects_unknown_sort_and_negative_paging() -> None:
    with pytest.raises(ValueError, match="sort_by"):
        list_deadlines(_store(), today=TODAY, sort_by="amount")
    with pytest.raises(ValueError):
        list_deadlines(_store(), today=TODAY, offset=-1)


def test_get_scholarship_deadline_reports_application_status() -> None:
    upcoming = get_scholarship_deadline(_store(), "e", today=TODAY)
    closed = get_scholarship_deadline(_store(), "old", today=TODAY)

    assert upcoming["application_status"] == "not_yet_open"
    assert upcoming["days_remaining"] == 128
    assert closed["application_status"] == "closed"
    assert closed["urgency_level"] is None

    with pytest.raises(ScholarshipNotFoundError) as excinfo:
        get_scholarship_deadline(_store(), "ghost", today=TODAY)
    assert excinfo.value.to_dict()["error"] == "SCHOLARSHIP_NOT_FOUND"


def test_deadline_calendar_groups_open_scholarships_by_date() -> None:
    store = CatalogStore.from_records(
        scholarships=[
            {"id": "x", "name": "Beta Grant", "provider_type": "NGO", "application_deadline": "2026-03-01"},
            {"id": "y", "name": "Alpha Grant", "provider_type": "Government", "application_deadline": "2026-03-01"},
            {"id": "z", "name": "Gamma Grant", "provider_type": "Private", "application_deadline": "2026-03-10"},
            {"id": "shut", "name": "Shut Grant", "status": "closed", "application_deadline": "2026-03-01"},
            {"id": "late", "name": "Late Grant", "application_deadline": "2026-05-01"},
        ]
    )

    calendar = deadline_calendar(store, date(2026, 2, 22), date(2026, 3, 31))

    assert calendar["start_date"] == "2026-02-22"
    assert [entry["date"] for entry in calendar["entries"]] == ["2026-03-01", "2026-03-10"]
    assert [entry["count"] for entry in calendar["entries"]] == [2, 1]
    assert [item["name"] for item in calendar["entries"][0]["scholarships"]] == ["Alpha Grant", "Beta Grant"]
    assert calendar["entries"][0]["scholarships"][0]["provider_type"] == "Government"


def test_deadline_calendar_rejects_inverted_range() -> None:
    with pytest.raises(ValueError, match="before start"):
        deadline_calendar(_store(), date(2026, 3, 31), date(2026, 3, 1))
