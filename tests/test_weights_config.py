from __future__ import annotations

import pytest

from src.match.engine import describe_scoring_weights
from src.match.weights import MAX_POSSIBLE_SCORE, SCORING_WEIGHTS, ScoringWeights, factor_names


def test_baseline_weights_sum_to_ninety_five() -> None:
    assert MAX_POSSIBLE_SCORE == 95
    assert SCORING_WEIGHTS.max_possible_score == sum(SCORING_WEIGHTS.to_dict().values())
    assert list(SCORING_WEIGHTS.to_dict()) == list(factor_names())


def test_from_mapping_accepts_nested_and_legacy_keys() -> None:
    weights = ScoringWeights.from_mapping(
        {"version": "pilot-2", "weights": {"PRIORITY_COURSE": 25, "documents_complete": 10}}
    )

    assert weights.version == "pilot-2"
    assert weights.priority_course == 25
    assert weights.documents_complete == 10
    assert weights.public_shs == 10
    assert weights.max_possible_score == 95


def test_from_mapping_accepts_flat_mapping_and_whole_floats() -> None:
    weights = ScoringWeights.from_mapping({"gwa_higher": 7.0})

    assert weights.gwa_higher == 7
    assert weights.half_gwa_bonus() == 3
    assert weights.version == "baseline-2026.1"


def test_from_mapping_rejects_unknown_factor() -> None:
    with pytest.raises(ValueError, match="Unknown scoring weight"):
        ScoringWeights.from_mapping({"essay_bonus": 5})


def test_from_mapping_rejects_fractional_weight() -> None:
    with pytest.raises(ValueError, match="whole number"):
        ScoringWeights.from_mapping({"pwd_bonus": 2.5})


def test_negative_weight_is_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        ScoringWeights(pwd_bonus=-1)


def test_all_zero_weights_are_rejected() -> None:
    with pytest.raises(ValueError, match="positive maximum"):
        ScoringWeights.from_mapping({factor: 0 for factor in factor_names()})


def test_describe_scoring_weights_reports_policy() -> None:
    payload = describe_scoring_weights()

    assert payload["success"] is True
    assert payload["max_possible_score"] == 95
    assert payload["weights"]["priority_course"] == 20
    assert payload["quick_match_base_percentage"] == 25
    assert set(payload["description"]) == set(factor_names())
