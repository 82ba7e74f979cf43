from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer

from src.normalize.constants import (
    DEGREE_PROGRAMS,
    DOCUMENT_STATUSES,
    DOCUMENT_TYPES,
    GWA_MAX,
    GWA_MIN,
    GWA_WARNING_BELOW,
    INCOME_MAX,
    INCOME_MIN,
    PH_BOUNDS,
    RESIDENCY_MAX,
    RESIDENCY_MIN,
    SHS_TYPES,
    STRAND_TYPES,
)
from src.normalize.profile import canonical_choice, is_inverted_gwa, normalize_gwa, profile_value

MAX_COURSE_SUGGESTIONS = 5
SUGGESTION_MIN_SIMILARITY = 0.2
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(slots=True)
class ValidationResult:
    errors: list[dict[str, str]] = field(default_factory=list)
    warnings: list[dict[str, str]] = field(default_factory=list)
    suggested_course: Optional[str] = None
    course_suggestions: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.append({"field": field_name, "message": message})

    def add_warning(self, field_name: str, message: str) -> None:
        self.warnings.append({"field": field_name, "message": message})

    def merge(self, other: ValidationResult) -> ValidationResult:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if other.suggested_course:
            self.suggested_course = other.suggested_course
        if other.course_suggestions:
            self.course_suggestions = list(other.course_suggestions)
        return self

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
        }
        if self.suggested_course:
            payload["suggested_course"] = self.suggested_course
        if self.course_suggestions:
            payload["course_suggestions"] = list(self.course_suggestions)
        return payload


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if np.isnan(numeric):
        return None
    return numeric


def validate_gwa(gwa: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(gwa):
        result.add_error("gwa", "GWA is required")
        return result

    numeric = _parse_number(gwa)
    if numeric is None:
        result.add_error("gwa", "GWA must be a valid number")
        return result

    if is_inverted_gwa(numeric):
        converted = normalize_gwa(numeric)
        result.add_warning("gwa", f"GWA {numeric:g} was read on the 1.0-5.0 scale and converted to {converted:g}")
        numeric = converted

    if numeric < GWA_MIN:
        result.add_error("gwa", f"GWA must be at least {GWA_MIN:g}")
    elif numeric > GWA_MAX:
        result.add_error("gwa", f"GWA cannot exceed {GWA_MAX:g}")
    elif numeric < GWA_WARNING_BELOW:
        result.add_warning("gwa", f"A GWA below {GWA_WARNING_BELOW:g} may limit scholarship options")
    return result


def validate_income(income: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(income):
        result.add_error("annual_income", "Annual household income is required")
        return result

    numeric = _parse_number(income)
    if numeric is None:
        result.add_error("annual_income", "Income must be a valid number")
        return result

    if numeric < INCOME_MIN:
        result.add_error("annual_income", "Income must be a positive number")
    if numeric > INCOME_MAX:
        result.add_error("annual_income", "Income value seems unrealistic. Please verify.")
    return result


def validate_shs_type(shs_type: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(shs_type):
        result.add_error("shs_type", "SHS type is required")
        return result
    if canonical_choice(shs_type, SHS_TYPES) is None:
        result.add_error("shs_type", f"SHS type must be one of: {', '.join(SHS_TYPES)}")
    return result


def validate_strand(strand: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(strand):
        return result
    if canonical_choice(strand, STRAND_TYPES) is None:
        result.add_error("strand", f"Strand must be one of: {', '.join(STRAND_TYPES)}")
    return result


def suggest_courses(query: str, *, limit: int = MAX_COURSE_SUGGESTIONS) -> list[str]:
    """Rank degree programs by character n-gram TF-IDF similarity to a misspelled course."""

    cleaned = query.strip().lower()
    if not cleaned:
        return []

    vectorizer = TfidfVectorizer(analyzer="char_wb", ngram_range=(2, 4), lowercase=True)
    matrix = vectorizer.fit_transform([cleaned, *DEGREE_PROGRAMS])
    similarities = (matrix[1:] @ matrix[0].T).toarray().ravel()

    ranked = sorted(
        (
            (float(score), program)
            for score, program in zip(similarities, DEGREE_PROGRAMS)
            if score >= SUGGESTION_MIN_SIMILARITY
        ),
        key=lambda item: (-item[0], item[1]),
    )
    return [program for _, program in ranked[:limit]]


def validate_course(course: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(course):
        return result

    text = str(course).strip()
    normalized = text.lower()
    if any(program.lower() == normalized for program in DEGREE_PROGRAMS):
        return result

    partial_matches = [
        program
        for program in DEGREE_PROGRAMS
        if normalized in program.lower() or program.lower() in normalized
    ]
    if not partial_matches:
        result.add_error(
            "intended_course",
            f'Course "{text}" is not in the standardized list of Philippine degree programs',
        )
        result.course_suggestions = suggest_courses(normalized)
    elif len(partial_matches) == 1:
        result.add_warning(
            "intended_course",
            f'Did you mean "{partial_matches[0]}"? Using standardized names helps with matching.',
        )
        result.suggested_course = partial_matches[0]
    else:
        top = partial_matches[:MAX_COURSE_SUGGESTIONS]
        result.add_warning(
            "intended_course",
            f"Multiple matches found. Please be more specific: {', '.join(top)}",
        )
        result.course_suggestions = top
    return result


def validate_residency_years(years: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(years):
        return result

    numeric = _parse_number(years)
    if numeric is None:
        result.add_error("residency_years", "Residency years must be a valid number")
        return result

    if numeric < RESIDENCY_MIN:
        result.add_error("residency_years", "Residency years cannot be negative")
    if numeric > RESIDENCY_MAX:
        result.add_error("residency_years", "Residency years value seems unrealistic")
    return result


def validate_document_type(document_type: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(document_type):
        result.add_error("document_type", "Document type is required")
    elif document_type not in DOCUMENT_TYPES:
        result.add_error("document_type", f"Document type must be one of: {', '.join(DOCUMENT_TYPES)}")
    return result


def validate_document_status(status: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(status):
        result.add_error("status", "Status is required")
    elif status not in DOCUMENT_STATUSES:
        result.add_error("status", f"Status must be one of: {', '.join(DOCUMENT_STATUSES)}")
    return result


def validate_email(email: Any) -> ValidationResult:
    result = ValidationResult()
    if _is_blank(email):
        result.add_error("email", "Email is required")
    elif not _EMAIL_PATTERN.match(str(email)):
        result.add_error("email", "Invalid email format")
    return result


def validate_coordinates(latitude: Any, longitude: Any) -> ValidationResult:
    result = ValidationResult()

    lat = _parse_number(latitude)
    if _is_blank(latitude):
        result.add_error("latitude", "Latitude is required")
    elif lat is None:
        result.add_error("latitude", "Latitude must be a valid number")
    elif not -90.0 <= lat <= 90.0:
        result.add_error("latitude", "Latitude must be between -90 and 90")

    lng = _parse_number(longitude)
    if _is_blank(longitude):
        result.add_error("longitude", "Longitude is required")
    elif lng is None:
        result.add_error("longitude", "Longitude must be a valid number")
    elif not -180.0 <= lng <= 180.0:
        result.add_error("longitude", "Longitude must be between -180 and 180")

    if result.is_valid and lat is not None and lng is not None:
        inside = (
            PH_BOUNDS["min_lat"] <= lat <= PH_BOUNDS["max_lat"]
            and PH_BOUNDS["min_lng"] <= lng <= PH_BOUNDS["max_lng"]
        )
        if not inside:
            result.add_warning("coordinates", "Coordinates appear to be outside the Philippines")
    return result


def validate_quick_scan_profile(profile: Mapping[str, Any] | Any) -> ValidationResult:
    result = ValidationResult()
    for partial in (
        validate_gwa(profile_value(profile, "gwa")),
        validate_income(profile_value(profile, "annual_income", "annual_household_income")),
        validate_shs_type(profile_value(profile, "shs_type")),
        validate_strand(profile_value(profile, "strand")),
        validate_course(profile_value(profile, "intended_course")),
        validate_residency_years(profile_value(profile, "residency_years")),
    ):
        result.merge(partial)
    return result


def validate_full_profile(profile: Mapping[str, Any] | Any) -> ValidationResult:
    result = validate_quick_scan_profile(profile)

    for field_name, label in (("first_name", "First name"), ("last_name", "Last name")):
        if _is_blank(profile_value(profile, field_name)):
            result.add_error(field_name, f"{label} is required")

    email = profile_value(profile, "email")
    if not _is_blank(email):
        result.errors.extend(validate_email(email).errors)
    return result
