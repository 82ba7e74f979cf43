from __future__ import annotations

from typing import Mapping

from src.match.weights import WEIGHT_DESCRIPTIONS, ScoringWeights, factor_names


def explain_breakdown(
    breakdown: Mapping[str, int],
    weights: ScoringWeights | None = None,
    *,
    max_reasons: int | None = None,
) -> list[str]:
    """Human-readable "why you matched" lines, strongest factor first."""

    active_weights = weights or ScoringWeights.baseline()
    order = {factor: index for index, factor in enumerate(factor_names())}
    triggered = [
        (int(points), factor)
        for factor, points in breakdown.items()
        if factor in WEIGHT_DESCRIPTIONS and int(points) > 0
    ]
    triggered.sort(key=lambda item: (-item[0], order[item[1]]))

    reasons: list[str] = []
    for points, factor in triggered:
        label = WEIGHT_DESCRIPTIONS[factor]
        if factor == "gwa_higher" and points < active_weights.gwa_higher:
            label = "No minimum GWA requirement"
        reasons.append(f"{label} (+{points})")
    if max_reasons is not None:
        return reasons[:max_reasons]
    return reasons
