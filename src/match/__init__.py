"""Scholarship matching: eligibility gates, weighted scoring and result assembly."""

from src.match.engine import (
    MAX_POSSIBLE_SCORE,
    SCORING_WEIGHTS,
    describe_scoring_weights,
    match_scholarships,
    quick_match,
)
from src.match.errors import (
    CityNotFoundError,
    NotFoundError,
    ProfileValidationError,
    ScholarshipNotFoundError,
    StudentNotFoundError,
)
from src.match.weights import ScoringWeights

__all__ = [
    "CityNotFoundError",
    "MAX_POSSIBLE_SCORE",
    "NotFoundError",
    "ProfileValidationError",
    "SCORING_WEIGHTS",
    "ScholarshipNotFoundError",
    "ScoringWeights",
    "StudentNotFoundError",
    "describe_scoring_weights",
    "match_scholarships",
    "quick_match",
]
