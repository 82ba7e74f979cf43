from __future__ import annotations

from src.match.explain import explain_breakdown


def test_explain_breakdown_orders_by_points_then_factor_order() -> None:
    breakdown = {
        "priority_course": 0,
        "public_shs": 10,
        "strand_match": 5,
        "priority_strand": 10,
        "documents_complete": 0,
        "income_lower": 5,
        "gwa_higher": 10,
        "total_score": 40,
    }

    reasons = explain_breakdown(breakdown)

    assert reasons == [
        "Public SHS graduates are favored by this provider (+10)",
        "Your strand is a priority strand for this scholarship (+10)",
        "Your GWA comfortably exceeds the minimum requirement (+10)",
        "Your strand is accepted by this scholarship (+5)",
        "Household income is well below the income ceiling (+5)",
    ]


def test_partial_gwa_bonus_is_labelled_as_open_requirement() -> None:
    reasons = explain_breakdown({"gwa_higher": 5, "pwd_bonus": 0})

    assert reasons == ["No minimum GWA requirement (+5)"]


def test_max_reasons_truncates() -> None:
    reasons = explain_breakdown({"priority_course": 20, "documents_complete": 15, "solo_parent": 5}, max_reasons=2)

    assert len(reasons) == 2
    assert reasons[0].endswith("(+20)")
