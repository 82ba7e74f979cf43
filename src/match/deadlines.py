from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Optional

from src.match.errors import ScholarshipNotFoundError
from src.normalize.schema import ScholarshipRecord

if TYPE_CHECKING:
    from src.io.catalog_store import CatalogStore

URGENT_DAYS = 14

# Upper bound of days remaining for each level, checked in order.
URGENCY_LEVELS: tuple[tuple[str, int], ...] = (
    ("last_day", 0),
    ("critical", 3),
    ("very_urgent", 7),
    ("urgent", URGENT_DAYS),
    ("soon", 30),
)


def days_remaining(deadline: Optional[date], today: date) -> Optional[int]:
    if deadline is None:
        return None
    return (deadline - today).days


def is_urgent(days: Optional[int]) -> bool:
    return days is not None and 0 <= days <= URGENT_DAYS


def urgency_level(days: Optional[int]) -> Optional[str]:
    if days is None or days < 0:
        return None
    for level, upper_bound in URGENCY_LEVELS:
        if days <= upper_bound:
            return level
    return "normal"


def deadline_message(days: Optional[int], level: Optional[str]) -> str:
    if days is None or level is None:
        return "Deadline has passed."
    plural = "" if days == 1 else "s"
    if level == "last_day":
        return "LAST DAY TO APPLY! Submit your application today!"
    if level == "critical":
        return f"CRITICAL: Only {days} day{plural} left! Apply immediately!"
    if level == "very_urgent":
        return f"VERY URGENT: {days} days remaining. Don't miss this deadline!"
    if level == "urgent":
        return f"URGENT: {days} days remaining. Start your application now."
    if level == "soon":
        return f"Deadline approaching: {days} days left. Plan your application."
    return f"{days} days until deadline."


def application_status(record: ScholarshipRecord, today: date) -> str:
    if record.application_deadline is None or record.application_deadline < today:
        return "closed"
    if record.application_start is not None and record.application_start > today:
        return "not_yet_open"
    return "open"


def _deadline_entry(record: ScholarshipRecord, today: date) -> dict[str, Any]:
    days = days_remaining(record.application_deadline, today)
    level = urgency_level(days)
    return {
        "id": record.scholarship_id,
        "name": record.name,
        "provider_name": record.provider_name,
        "provider_type": record.provider_type,
        "official_link": record.official_link,
        "application_start": record.application_start.isoformat() if record.application_start else None,
        "application_deadline": (
            record.application_deadline.isoformat() if record.application_deadline else None
        ),
        "days_remaining": days,
        "is_urgent": is_urgent(days),
        "urgency_level": level,
        "min_gwa": record.eligibility.min_gwa,
        "income_ceiling": record.eligibility.income_ceiling,
        "tags": list(record.tags),
        "message": deadline_message(days, level),
    }


def list_deadlines(
    store: CatalogStore,
    *,
    today: date | None = None,
    urgent_only: bool = False,
    provider_type: str | None = None,
    sort_by: str = "deadline",
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    if sort_by not in {"deadline", "name"}:
        raise ValueError(f"Unsupported sort_by '{sort_by}'. Expected 'deadline' or 'name'.")
    if limit < 0 or offset < 0:
        raise ValueError("limit and offset must be non-negative.")

    effective_today = today or date.today()
    open_df = store.list_open_scholarships(effective_today)
    entries = [_deadline_entry(ScholarshipRecord.from_row(row), effective_today) for _, row in open_df.iterrows()]

    if urgent_only:
        entries = [entry for entry in entries if entry["is_urgent"]]
    if provider_type:
        entries = [entry for entry in entries if entry["provider_type"] == provider_type]
    if sort_by == "name":
        entries.sort(key=lambda entry: (entry["name"], entry["id"]))

    total = len(entries)
    page = entries[offset : offset + limit]
    return {
        "success": True,
        "server_date": effective_today.isoformat(),
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + limit < total,
        },
        "summary": {
            "total": total,
            "critical": sum(1 for entry in page if entry["urgency_level"] in {"critical", "last_day"}),
            "urgent": sum(1 for entry in page if entry["is_urgent"]),
            "closing_this_week": sum(1 for entry in page if entry["days_remaining"] <= 7),
            "closing_this_month": sum(1 for entry in page if entry["days_remaining"] <= 30),
        },
        "deadlines": page,
    }


def get_scholarship_deadline(
    store: CatalogStore, scholarship_id: str, *, today: date | None = None
) -> dict[str, Any]:
    effective_today = today or date.today()
    row = store.get_scholarship_row(scholarship_id)
    if row is None:
        raise ScholarshipNotFoundError(scholarship_id)

    record = ScholarshipRecord.from_row(row)
    entry = _deadline_entry(record, effective_today)
    entry["application_status"] = application_status(record, effective_today)
    return entry


def deadline_calendar(store: CatalogStore, start: date, end: date) -> dict[str, Any]:
    """Open scholarships grouped by deadline date within ``[start, end]``, names sorted within a day."""

    if end < start:
        raise ValueError(f"Calendar end {end.isoformat()} is before start {start.isoformat()}.")

    records = [ScholarshipRecord.from_row(row) for _, row in store.scholarships.iterrows()]
    in_window = sorted(
        (
            record
            for record in records
            if record.status == "open"
            and record.application_deadline is not None
            and start <= record.application_deadline <= end
        ),
        key=lambda record: (record.application_deadline, record.name or "", record.scholarship_id),
    )

    entries: list[dict[str, Any]] = []
    for record in in_window:
        deadline = record.application_deadline.isoformat()
        if not entries or entries[-1]["date"] != deadline:
            entries.append({"date": deadline, "count": 0, "scholarships": []})
        entries[-1]["count"] += 1
        entries[-1]["scholarships"].append(
            {
                "id": record.scholarship_id,
                "name": record.name,
                "provider_name": record.provider_name,
                "provider_type": record.provider_type,
            }
        )

    return {
        "success": True,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "entries": entries,
    }
