from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import numpy as np

from src.normalize.constants import (
    DOCUMENT_TYPES,
    GWA_TRANSMUTATION,
    INVERTED_GWA_MAX,
    INVERTED_GWA_MIN,
    SHS_TYPES,
    STRAND_TYPES,
)
from src.normalize.schema import (
    LocationRef,
    SpecialStatuses,
    StudentProfile,
    coerce_bool,
    coerce_optional_float,
    coerce_optional_int,
    coerce_optional_text,
    is_missing,
)

_TRANSMUTATION_X = np.array([point[0] for point in GWA_TRANSMUTATION], dtype=float)
_TRANSMUTATION_Y = np.array([point[1] for point in GWA_TRANSMUTATION], dtype=float)


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def profile_value(profile: Any, *keys: str) -> Any:
    """Read the first present key, accepting camelCase spellings of snake_case names."""

    for key in keys:
        for candidate in (key, _camel_case(key)):
            if isinstance(profile, Mapping):
                if candidate in profile and not is_missing(profile[candidate]):
                    return profile[candidate]
            else:
                value = getattr(profile, candidate, None)
                if not is_missing(value):
                    return value
    return None


def canonical_choice(value: Any, choices: Iterable[str]) -> Optional[str]:
    text = coerce_optional_text(value)
    if text is None:
        return None
    lowered = text.lower()
    for choice in choices:
        if choice.lower() == lowered:
            return choice
    return None


def is_inverted_gwa(value: float) -> bool:
    return INVERTED_GWA_MIN <= value <= INVERTED_GWA_MAX


def normalize_gwa(value: Any) -> Optional[float]:
    """Return GWA on the 70-100 scale, converting 1.0-5.0 college grades through the transmutation table."""

    numeric = coerce_optional_float(value)
    if numeric is None:
        return None
    if is_inverted_gwa(numeric):
        return round(float(np.interp(numeric, _TRANSMUTATION_X, _TRANSMUTATION_Y)), 2)
    return numeric


def normalize_document_types(values: Iterable[Any] | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    return frozenset(
        canonical
        for canonical in (canonical_choice(value, DOCUMENT_TYPES) for value in values)
        if canonical is not None
    )


def location_from_city_details(
    city_details: Mapping[str, Any] | None, city_id: Any = None
) -> LocationRef:
    if not city_details:
        return LocationRef(city_id=coerce_optional_int(city_id))
    return LocationRef(
        region_id=coerce_optional_int((city_details.get("region") or {}).get("id")),
        province_id=coerce_optional_int((city_details.get("province") or {}).get("id")),
        city_id=coerce_optional_int((city_details.get("city") or {}).get("id")),
    )


def _special_statuses(source: Any) -> SpecialStatuses:
    return SpecialStatuses(
        is_pwd=coerce_bool(profile_value(source, "is_pwd")),
        is_solo_parent_child=coerce_bool(profile_value(source, "is_solo_parent_child")),
        is_indigenous=coerce_bool(profile_value(source, "is_indigenous")),
    )


def _full_name(row: Mapping[str, Any]) -> Optional[str]:
    parts = [coerce_optional_text(row.get("first_name")), coerce_optional_text(row.get("last_name"))]
    name = " ".join(part for part in parts if part)
    return name or None


def build_student_profile(
    student_row: Mapping[str, Any],
    *,
    city_details: Mapping[str, Any] | None = None,
    uploaded_document_types: Iterable[Any] | None = None,
) -> StudentProfile:
    """Profile for a persisted student, with geographic ancestry already resolved.

    A stored student with no recorded residency counts as zero years; only quick
    scans leave residency unknown.
    """

    return StudentProfile(
        gwa=normalize_gwa(student_row.get("gwa")) or 0.0,
        annual_household_income=coerce_optional_float(student_row.get("annual_household_income")) or 0.0,
        shs_type=canonical_choice(student_row.get("shs_type"), SHS_TYPES) or "Private",
        strand=canonical_choice(student_row.get("strand"), STRAND_TYPES),
        intended_course=coerce_optional_text(student_row.get("intended_course")),
        location=location_from_city_details(city_details, student_row.get("city_id")),
        residency_years=coerce_optional_int(student_row.get("residency_years")) or 0,
        special_statuses=_special_statuses(student_row),
        uploaded_document_types=normalize_document_types(uploaded_document_types),
        student_id=coerce_optional_text(student_row.get("student_id")),
        full_name=_full_name(student_row),
    )


def build_quick_profile(
    payload: Mapping[str, Any],
    *,
    city_details: Mapping[str, Any] | None = None,
) -> StudentProfile:
    """Profile for an anonymous 1-minute scan: no documents, residency may be unknown."""

    return StudentProfile(
        gwa=normalize_gwa(profile_value(payload, "gwa")) or 0.0,
        annual_household_income=coerce_optional_float(
            profile_value(payload, "annual_income", "annual_household_income")
        )
        or 0.0,
        shs_type=canonical_choice(profile_value(payload, "shs_type"), SHS_TYPES) or "Private",
        strand=canonical_choice(profile_value(payload, "strand"), STRAND_TYPES),
        intended_course=coerce_optional_text(profile_value(payload, "intended_course")),
        location=location_from_city_details(city_details, profile_value(payload, "city_id")),
        residency_years=coerce_optional_int(profile_value(payload, "residency_years")),
        special_statuses=_special_statuses(payload),
    )
