from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

BASELINE_VERSION = "baseline-2026.1"

INCOME_RATIO_THRESHOLD = 0.5
GWA_MARGIN_THRESHOLD = 5.0
RESIDENCY_MARGIN_YEARS = 2
QUICK_MATCH_BASE_PERCENTAGE = 25

# Upper-case factor names accepted in weight config files.
_LEGACY_KEYS = {
    "PRIORITY_COURSE": "priority_course",
    "PUBLIC_SHS": "public_shs",
    "STRAND_MATCH": "strand_match",
    "PRIORITY_STRAND": "priority_strand",
    "DOCUMENTS_COMPLETE": "documents_complete",
    "INCOME_LOWER": "income_lower",
    "GWA_HIGHER": "gwa_higher",
    "RESIDENCY_BONUS": "residency_bonus",
    "PWD_BONUS": "pwd_bonus",
    "SOLO_PARENT": "solo_parent",
    "INDIGENOUS": "indigenous",
}

WEIGHT_DESCRIPTIONS = {
    "priority_course": "Your intended course is a priority course for this scholarship",
    "public_shs": "Public SHS graduates are favored by this provider",
    "strand_match": "Your strand is accepted by this scholarship",
    "priority_strand": "Your strand is a priority strand for this scholarship",
    "documents_complete": "All required documents are ready",
    "income_lower": "Household income is well below the income ceiling",
    "gwa_higher": "Your GWA comfortably exceeds the minimum requirement",
    "residency_bonus": "You exceed the minimum residency requirement",
    "pwd_bonus": "Person with disability status",
    "solo_parent": "Child of a solo parent",
    "indigenous": "Member of an indigenous peoples group",
}


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Versioned scoring policy; `max_possible_score` is the sum of every weight."""

    priority_course: int = 20
    public_shs: int = 10
    strand_match: int = 5
    priority_strand: int = 10
    documents_complete: int = 15
    income_lower: int = 5
    gwa_higher: int = 10
    residency_bonus: int = 5
    pwd_bonus: int = 5
    solo_parent: int = 5
    indigenous: int = 5
    version: str = BASELINE_VERSION

    def __post_init__(self) -> None:
        for factor in factor_names():
            value = getattr(self, factor)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Scoring weight '{factor}' must be an integer.")
            if value < 0:
                raise ValueError(f"Scoring weight '{factor}' must be non-negative.")
        if self.max_possible_score <= 0:
            raise ValueError("Scoring weights must sum to a positive maximum score.")

    @classmethod
    def baseline(cls) -> ScoringWeights:
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> ScoringWeights:
        values = dict(payload or {})
        version = str(values.pop("version", BASELINE_VERSION))
        if isinstance(values.get("weights"), Mapping):
            values = dict(values["weights"])

        baseline = cls.baseline()
        resolved: dict[str, int] = {}
        for key, raw in values.items():
            factor = _LEGACY_KEYS.get(key, key)
            if factor not in WEIGHT_DESCRIPTIONS:
                raise ValueError(f"Unknown scoring weight '{key}'.")
            numeric = float(raw)
            if not numeric.is_integer():
                raise ValueError(f"Scoring weight '{key}' must be a whole number.")
            resolved[factor] = int(numeric)

        return cls(
            **{factor: resolved.get(factor, getattr(baseline, factor)) for factor in factor_names()},
            version=version,
        )

    @property
    def max_possible_score(self) -> int:
        return sum(getattr(self, factor) for factor in factor_names())

    def half_gwa_bonus(self) -> int:
        return self.gwa_higher // 2

    def to_dict(self) -> dict[str, int]:
        return {factor: getattr(self, factor) for factor in factor_names()}


def factor_names() -> tuple[str, ...]:
    return tuple(item.name for item in fields(ScoringWeights) if item.name != "version")


QUICK_FACTORS = ("priority_course", "public_shs", "strand_match", "priority_strand")

SCORING_WEIGHTS = ScoringWeights.baseline()
MAX_POSSIBLE_SCORE = SCORING_WEIGHTS.max_possible_score
