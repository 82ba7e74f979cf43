from __future__ import annotations

import logging
import time
from datetime import UTC, date, datetime
from typing import Any, Mapping

import pandas as pd

from src.io.catalog_store import CatalogStore
from src.match.errors import CityNotFoundError, ProfileValidationError, StudentNotFoundError
from src.match.stage1_eligibility import apply_eligibility_filter
from src.match.stage2_scoring import score_stage2
from src.match.stage3_assemble import assemble_matches, build_summary, to_match_results
from src.match.weights import (
    MAX_POSSIBLE_SCORE,
    QUICK_MATCH_BASE_PERCENTAGE,
    SCORING_WEIGHTS,
    WEIGHT_DESCRIPTIONS,
    ScoringWeights,
)
from src.normalize.profile import build_quick_profile, build_student_profile, profile_value
from src.normalize.schema import StudentProfile
from src.normalize.validation import validate_full_profile, validate_quick_scan_profile

logger = logging.getLogger(__name__)

QUICK_MATCH_LIMIT = 50

__all__ = [
    "MAX_POSSIBLE_SCORE",
    "QUICK_MATCH_LIMIT",
    "SCORING_WEIGHTS",
    "describe_scoring_weights",
    "match_scholarships",
    "quick_match",
]


def _elapsed_ms(started_at: float) -> int:
    return int(round((time.perf_counter() - started_at) * 1000.0))


def _timestamp() -> str:
    return datetime.now(tz=UTC).isoformat()


def _run_phases(
    catalog_df: pd.DataFrame,
    profile: StudentProfile,
    *,
    weights: ScoringWeights,
    today: date,
    quick: bool,
) -> pd.DataFrame:
    eligible_df, ineligible_df = apply_eligibility_filter(catalog_df, profile, today=today)
    logger.debug("Phase 1 kept %d, excluded %d scholarships", len(eligible_df), len(ineligible_df))
    scored_df = score_stage2(eligible_df, profile, weights=weights, quick=quick)
    return assemble_matches(scored_df, profile, today=today, include_documents=not quick)


def match_scholarships(
    student_id: str,
    *,
    store: CatalogStore,
    weights: ScoringWeights | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Full three-phase match for a persisted student.

    Raises StudentNotFoundError for unknown ids and ProfileValidationError when the
    stored profile fails full-profile validation.
    """

    started_at = time.perf_counter()
    active_weights = weights or SCORING_WEIGHTS
    effective_today = today or date.today()

    student_row = store.get_student_row(student_id)
    if student_row is None:
        logger.warning("Match requested for unknown student %s", student_id)
        raise StudentNotFoundError(student_id)

    validation = validate_full_profile(student_row)
    if not validation.is_valid:
        raise ProfileValidationError(validation)

    profile = build_student_profile(
        student_row,
        city_details=store.get_city_details(student_row.get("city_id")),
        uploaded_document_types=store.get_uploaded_document_types(student_id),
    )

    catalog_df = store.list_open_scholarships(effective_today)
    assembled_df = _run_phases(
        catalog_df, profile, weights=active_weights, today=effective_today, quick=False
    )
    matches = to_match_results(assembled_df, active_weights)

    processing_time_ms = _elapsed_ms(started_at)
    logger.info(
        "Matched student=%s candidates=%d matches=%d in %dms",
        student_id,
        len(catalog_df),
        len(matches),
        processing_time_ms,
    )
    return {
        "success": True,
        "student_id": student_id,
        "student_name": profile.full_name,
        "total_matches": len(matches),
        "processing_time_ms": processing_time_ms,
        "timestamp": _timestamp(),
        "weights_version": active_weights.version,
        "matches": [match.to_dict() for match in matches],
        "summary": build_summary(matches),
    }


def quick_match(
    payload: Mapping[str, Any],
    *,
    store: CatalogStore,
    weights: ScoringWeights | None = None,
    today: date | None = None,
    limit: int = QUICK_MATCH_LIMIT,
) -> dict[str, Any]:
    """1-minute scan: no persisted student, no documents, flat base percentage on top of the score."""

    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}.")

    started_at = time.perf_counter()
    active_weights = weights or SCORING_WEIGHTS
    effective_today = today or date.today()

    validation = validate_quick_scan_profile(payload)
    if not validation.is_valid:
        raise ProfileValidationError(validation)

    city_id = profile_value(payload, "city_id")
    city_details = None
    if city_id is not None:
        city_details = store.get_city_details(city_id)
        if city_details is None:
            logger.warning("Quick match requested for unknown city %s", city_id)
            raise CityNotFoundError(city_id)

    profile = build_quick_profile(payload, city_details=city_details)
    catalog_df = store.list_open_scholarships(effective_today)
    assembled_df = _run_phases(
        catalog_df, profile, weights=active_weights, today=effective_today, quick=True
    )
    matches = to_match_results(assembled_df.head(limit), active_weights)

    processing_time_ms = _elapsed_ms(started_at)
    logger.info(
        "Quick match candidates=%d matches=%d in %dms",
        len(catalog_df),
        len(matches),
        processing_time_ms,
    )
    return {
        "success": True,
        "total_matches": len(matches),
        "processing_time_ms": processing_time_ms,
        "timestamp": _timestamp(),
        "weights_version": active_weights.version,
        "matches": [match.to_dict() for match in matches],
    }


def describe_scoring_weights(weights: ScoringWeights | None = None) -> dict[str, Any]:
    active_weights = weights or SCORING_WEIGHTS
    return {
        "success": True,
        "version": active_weights.version,
        "weights": active_weights.to_dict(),
        "max_possible_score": active_weights.max_possible_score,
        "quick_match_base_percentage": QUICK_MATCH_BASE_PERCENTAGE,
        "description": dict(WEIGHT_DESCRIPTIONS),
    }
