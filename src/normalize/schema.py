from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

import numpy as np
import pandas as pd


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, set, frozenset, dict, np.ndarray)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def coerce_optional_float(value: Any) -> Optional[float]:
    if is_missing(value):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def coerce_optional_int(value: Any) -> Optional[int]:
    numeric = coerce_optional_float(value)
    if numeric is None:
        return None
    return int(numeric)


def coerce_optional_text(value: Any) -> Optional[str]:
    if is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def coerce_bool(value: Any) -> bool:
    if is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


def coerce_date(value: Any) -> Optional[date]:
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(timestamp):
        return None
    return timestamp.date()


def coerce_text_tuple(value: Any) -> Optional[tuple[str, ...]]:
    """Empty or missing lists collapse to None, which reads as "unconstrained"."""

    if is_missing(value):
        return None
    if isinstance(value, str):
        items = [value]
    elif isinstance(value, Iterable):
        items = list(value)
    else:
        items = [value]
    cleaned = tuple(text for text in (coerce_optional_text(item) for item in items) if text)
    return cleaned or None


def coerce_int_tuple(value: Any) -> Optional[tuple[int, ...]]:
    texts = coerce_text_tuple(value)
    if texts is None:
        return None
    ids: list[int] = []
    for text in texts:
        number = coerce_optional_int(text)
        if number is not None:
            ids.append(number)
    return tuple(ids) or None


@dataclass(frozen=True, slots=True)
class LocationRef:
    region_id: Optional[int] = None
    province_id: Optional[int] = None
    city_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SpecialStatuses:
    is_pwd: bool = False
    is_solo_parent_child: bool = False
    is_indigenous: bool = False


@dataclass(frozen=True, slots=True)
class StudentProfile:
    """Canonical student profile consumed by every matching phase.

    `gwa` is always on the 70-100 percentage scale; `residency_years` is
    None when the caller never supplied it (quick scans).
    """

    gwa: float
    annual_household_income: float
    shs_type: str
    strand: Optional[str] = None
    intended_course: Optional[str] = None
    location: LocationRef = LocationRef()
    residency_years: Optional[int] = None
    special_statuses: SpecialStatuses = SpecialStatuses()
    uploaded_document_types: frozenset[str] = frozenset()
    student_id: Optional[str] = None
    full_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Eligibility:
    min_gwa: Optional[float] = None
    income_ceiling: Optional[float] = None
    allowed_strands: Optional[tuple[str, ...]] = None
    priority_strands: Optional[tuple[str, ...]] = None
    priority_courses: Optional[tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class LocationConstraints:
    nationwide: bool = False
    region_ids: Optional[tuple[int, ...]] = None
    province_ids: Optional[tuple[int, ...]] = None
    city_ids: Optional[tuple[int, ...]] = None
    min_residency_years: Optional[int] = None

    @property
    def has_area_lists(self) -> bool:
        return any(ids is not None for ids in (self.region_ids, self.province_ids, self.city_ids))


# Flat catalog columns, one per optional constraint field.
SCHOLARSHIP_COLUMNS = [
    "scholarship_id",
    "name",
    "provider_name",
    "provider_type",
    "description",
    "official_link",
    "logo_url",
    "application_start",
    "application_deadline",
    "academic_year",
    "status",
    "min_gwa",
    "income_ceiling",
    "allowed_strands",
    "priority_strands",
    "priority_courses",
    "nationwide",
    "region_ids",
    "province_ids",
    "city_ids",
    "min_residency_years",
    "required_documents",
    "benefits",
    "slots_available",
    "is_renewable",
    "tags",
]

_ELIGIBILITY_KEYS = ("min_gwa", "income_ceiling", "allowed_strands", "priority_strands", "priority_courses")
_LOCATION_KEYS = ("nationwide", "region_ids", "province_ids", "city_ids", "min_residency_years")


def flatten_scholarship_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Lift the nested `eligibility` / `location_constraints` bags into flat columns."""

    flat = {key: value for key, value in payload.items() if key not in {"eligibility", "location_constraints"}}
    if "id" in flat and "scholarship_id" not in flat:
        flat["scholarship_id"] = flat.pop("id")

    eligibility = payload.get("eligibility")
    if not isinstance(eligibility, Mapping):
        eligibility = {}
    for key in _ELIGIBILITY_KEYS:
        if key in eligibility:
            flat[key] = eligibility[key]

    location_constraints = payload.get("location_constraints")
    if not isinstance(location_constraints, Mapping):
        location_constraints = {}
    for key in _LOCATION_KEYS:
        if key in location_constraints:
            flat[key] = location_constraints[key]

    for column in SCHOLARSHIP_COLUMNS:
        flat.setdefault(column, None)
    return flat


@dataclass(frozen=True, slots=True)
class ScholarshipRecord:
    scholarship_id: str
    name: str
    provider_name: Optional[str]
    provider_type: Optional[str]
    application_deadline: Optional[date]
    application_start: Optional[date] = None
    status: str = "open"
    eligibility: Eligibility = Eligibility()
    location_constraints: LocationConstraints = LocationConstraints()
    required_documents: tuple[str, ...] = ()
    description: Optional[str] = None
    official_link: Optional[str] = None
    logo_url: Optional[str] = None
    academic_year: Optional[str] = None
    benefits: Optional[dict[str, Any]] = field(default=None, compare=False)
    slots_available: Optional[int] = None
    is_renewable: bool = False
    tags: tuple[str, ...] = ()

    @classmethod
    def from_row(cls, row: Mapping[str, Any] | pd.Series) -> ScholarshipRecord:
        benefits = row.get("benefits")
        if isinstance(benefits, str) and benefits.strip():
            benefits = json.loads(benefits)
        return cls(
            scholarship_id=str(row.get("scholarship_id")),
            name=coerce_optional_text(row.get("name")) or "",
            provider_name=coerce_optional_text(row.get("provider_name")),
            provider_type=coerce_optional_text(row.get("provider_type")),
            application_deadline=coerce_date(row.get("application_deadline")),
            application_start=coerce_date(row.get("application_start")),
            status=(coerce_optional_text(row.get("status")) or "open").lower(),
            eligibility=Eligibility(
                min_gwa=coerce_optional_float(row.get("min_gwa")),
                income_ceiling=coerce_optional_float(row.get("income_ceiling")),
                allowed_strands=coerce_text_tuple(row.get("allowed_strands")),
                priority_strands=coerce_text_tuple(row.get("priority_strands")),
                priority_courses=coerce_text_tuple(row.get("priority_courses")),
            ),
            location_constraints=LocationConstraints(
                nationwide=coerce_bool(row.get("nationwide")),
                region_ids=coerce_int_tuple(row.get("region_ids")),
                province_ids=coerce_int_tuple(row.get("province_ids")),
                city_ids=coerce_int_tuple(row.get("city_ids")),
                min_residency_years=coerce_optional_int(row.get("min_residency_years")),
            ),
            required_documents=coerce_text_tuple(row.get("required_documents")) or (),
            description=coerce_optional_text(row.get("description")),
            official_link=coerce_optional_text(row.get("official_link")),
            logo_url=coerce_optional_text(row.get("logo_url")),
            academic_year=coerce_optional_text(row.get("academic_year")),
            benefits=dict(benefits) if isinstance(benefits, Mapping) else None,
            slots_available=coerce_optional_int(row.get("slots_available")),
            is_renewable=coerce_bool(row.get("is_renewable")),
            tags=coerce_text_tuple(row.get("tags")) or (),
        )

    def to_output_dict(self) -> dict[str, Any]:
        """Display subset attached to every match."""

        return {
            "id": self.scholarship_id,
            "name": self.name,
            "provider_name": self.provider_name,
            "provider_type": self.provider_type,
            "description": self.description,
            "official_link": self.official_link,
            "logo_url": self.logo_url,
            "application_deadline": (
                self.application_deadline.isoformat() if self.application_deadline else None
            ),
            "academic_year": self.academic_year,
            "benefits": self.benefits,
            "eligibility": {
                "min_gwa": self.eligibility.min_gwa,
                "income_ceiling": self.eligibility.income_ceiling,
                "allowed_strands": _as_list(self.eligibility.allowed_strands),
                "priority_courses": _as_list(self.eligibility.priority_courses),
            },
            "required_documents": list(self.required_documents),
            "slots_available": self.slots_available,
            "is_renewable": self.is_renewable,
            "tags": list(self.tags),
        }


def _as_list(values: Optional[tuple[Any, ...]]) -> Optional[list[Any]]:
    return list(values) if values is not None else None


@dataclass(slots=True)
class MatchResult:
    scholarship: dict[str, Any]
    match_score: int
    match_percentage: int
    scoring_breakdown: dict[str, int]
    days_remaining: Optional[int]
    is_urgent: bool
    urgency_level: Optional[str]
    missing_documents: Optional[list[str]] = None
    match_reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "scholarship": self.scholarship,
            "match_score": self.match_score,
            "match_percentage": self.match_percentage,
            "scoring_breakdown": dict(self.scoring_breakdown),
            "days_remaining": self.days_remaining,
            "is_urgent": self.is_urgent,
            "urgency_level": self.urgency_level,
            "match_reasons": list(self.match_reasons),
        }
        if self.missing_documents is not None:
            payload["missing_documents"] = list(self.missing_documents)
        return payload
