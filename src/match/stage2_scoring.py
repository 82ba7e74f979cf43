from __future__ import annotations

from typing import Iterable, Optional

import numpy as np
import pandas as pd

from src.match.weights import (
    GWA_MARGIN_THRESHOLD,
    INCOME_RATIO_THRESHOLD,
    QUICK_FACTORS,
    QUICK_MATCH_BASE_PERCENTAGE,
    RESIDENCY_MARGIN_YEARS,
    ScoringWeights,
    factor_names,
)
from src.normalize.schema import ScholarshipRecord, StudentProfile

PUBLIC_SHS_FRIENDLY_PROVIDERS = frozenset({"Private", "NGO"})


def _normalize_course(value: Optional[str]) -> str:
    if value is None:
        return ""
    return " ".join(value.strip().lower().split())


def course_matches_priority(intended_course: Optional[str], priority_courses: Iterable[str] | None) -> bool:
    """Bidirectional, case-insensitive substring containment between the course and any priority course."""

    course = _normalize_course(intended_course)
    if not course or not priority_courses:
        return False
    for priority in priority_courses:
        candidate = _normalize_course(priority)
        if candidate and (candidate in course or course in candidate):
            return True
    return False


def _public_shs_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> int:
    if profile.shs_type == "Public" and record.provider_type in PUBLIC_SHS_FRIENDLY_PROVIDERS:
        return weights.public_shs
    return 0


def _strand_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> tuple[int, int]:
    allowed = record.eligibility.allowed_strands
    priority = record.eligibility.priority_strands

    strand_match = 0
    if allowed is None or (profile.strand is not None and profile.strand in allowed):
        strand_match = weights.strand_match

    priority_strand = 0
    if priority is not None and profile.strand is not None and profile.strand in priority:
        priority_strand = weights.priority_strand
    return strand_match, priority_strand


def _documents_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> int:
    if all(document in profile.uploaded_document_types for document in record.required_documents):
        return weights.documents_complete
    return 0


def _income_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> int:
    ceiling = record.eligibility.income_ceiling
    if ceiling is None or ceiling <= 0:
        return 0
    if profile.annual_household_income / ceiling <= INCOME_RATIO_THRESHOLD:
        return weights.income_lower
    return 0


def _gwa_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> int:
    min_gwa = record.eligibility.min_gwa
    if min_gwa is None:
        return weights.half_gwa_bonus()
    if profile.gwa - min_gwa >= GWA_MARGIN_THRESHOLD:
        return weights.gwa_higher
    return 0


def _residency_points(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> int:
    min_residency = record.location_constraints.min_residency_years
    if not min_residency or profile.residency_years is None:
        return 0
    if profile.residency_years >= min_residency + RESIDENCY_MARGIN_YEARS:
        return weights.residency_bonus
    return 0


def score_scholarship(
    record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights
) -> dict[str, int]:
    """Points earned per factor; every value is either 0 or a fixed share of its weight."""

    strand_match, priority_strand = _strand_points(record, profile, weights)
    statuses = profile.special_statuses
    breakdown = {
        "priority_course": (
            weights.priority_course
            if course_matches_priority(profile.intended_course, record.eligibility.priority_courses)
            else 0
        ),
        "public_shs": _public_shs_points(record, profile, weights),
        "strand_match": strand_match,
        "priority_strand": priority_strand,
        "documents_complete": _documents_points(record, profile, weights),
        "income_lower": _income_points(record, profile, weights),
        "gwa_higher": _gwa_points(record, profile, weights),
        "residency_bonus": _residency_points(record, profile, weights),
        "pwd_bonus": weights.pwd_bonus if statuses.is_pwd else 0,
        "solo_parent": weights.solo_parent if statuses.is_solo_parent_child else 0,
        "indigenous": weights.indigenous if statuses.is_indigenous else 0,
    }
    return {factor: int(breakdown[factor]) for factor in factor_names()}


def score_quick(record: ScholarshipRecord, profile: StudentProfile, weights: ScoringWeights) -> dict[str, int]:
    full = score_scholarship(record, profile, weights)
    return {factor: full[factor] for factor in QUICK_FACTORS}


def compute_match_percentage(
    scores: np.ndarray, max_possible_score: int, *, base_percentage: int = 0
) -> np.ndarray:
    if scores.size == 0:
        return np.array([], dtype=int)
    ratio = scores.astype(float) / float(max_possible_score) * 100.0
    rounded = np.floor(ratio + 0.5) + base_percentage
    return np.clip(rounded, 0, 100).astype(int)


def score_stage2(
    eligible_df: pd.DataFrame,
    profile: StudentProfile,
    *,
    weights: ScoringWeights | None = None,
    quick: bool = False,
) -> pd.DataFrame:
    active_weights = weights or ScoringWeights.baseline()
    scorer = score_quick if quick else score_scholarship
    factors = QUICK_FACTORS if quick else factor_names()

    scored_df = eligible_df.copy()
    breakdowns = [
        scorer(ScholarshipRecord.from_row(row), profile, active_weights) for _, row in scored_df.iterrows()
    ]

    scores = np.array([sum(breakdown.values()) for breakdown in breakdowns], dtype=int)
    scored_df["scoring_breakdown"] = pd.Series(breakdowns, index=scored_df.index, dtype=object)
    for factor in factors:
        scored_df[f"{factor}_points"] = np.array(
            [breakdown[factor] for breakdown in breakdowns], dtype=int
        )
    scored_df["match_score"] = scores
    scored_df["match_percentage"] = compute_match_percentage(
        scores,
        active_weights.max_possible_score,
        base_percentage=QUICK_MATCH_BASE_PERCENTAGE if quick else 0,
    )
    return scored_df
