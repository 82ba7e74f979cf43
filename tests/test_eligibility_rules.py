from __future__ import annotations

from datetime import date

import pandas as pd

from src.match.stage1_eligibility import apply_eligibility_filter
from src.normalize.schema import SCHOLARSHIP_COLUMNS, LocationRef, StudentProfile

TODAY = date(2026, 2, 22)


def _row(scholarship_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {column: None for column in SCHOLARSHIP_COLUMNS}
    row.update(
        {
            "scholarship_id": scholarship_id,
            "name": scholarship_id.title(),
            "provider_type": "Government",
            "application_deadline": date(2026, 3, 15),
            "status": "open",
            "nationwide": True,
        }
    )
    row.update(overrides)
    return row


def _profile(**overrides: object) -> StudentProfile:
    values: dict[str, object] = {
        "gwa": 88.0,
        "annual_household_income": 200000.0,
        "shs_type": "Public",
        "strand": "STEM",
        "intended_course": "Computer Science",
        "location": LocationRef(region_id=13, province_id=1, city_id=2),
        "residency_years": 4,
    }
    values.update(overrides)
    return StudentProfile(**values)


def test_apply_eligibility_filter_emits_reason_codes_for_each_rule() -> None:
    df = pd.DataFrame(
        [
            _row("deadline", application_deadline=date(2026, 2, 1)),
            _row("closed", status="closed"),
            _row("gwa", min_gwa=90.0),
            _row("income", income_ceiling=150000.0),
            _row("location", nationwide=False, city_ids=[3]),
            _row("residency", nationwide=False, city_ids=[2], min_residency_years=5),
            _row("strand", allowed_strands=["ABM", "HUMSS"]),
            _row("eligible"),
        ]
    )

    eligible_df, ineligible_df = apply_eligibility_filter(df, _profile(), today=TODAY)

    assert eligible_df["scholarship_id"].tolist() == ["eligible"]
    assert "reasons" not in eligible_df.columns
    reasons = dict(zip(ineligible_df["scholarship_id"], ineligible_df["reasons"]))
    assert reasons == {
        "deadline": ["DEADLINE_PASSED"],
        "closed": ["NOT_OPEN"],
        "gwa": ["GWA_BELOW_MIN"],
        "income": ["INCOME_ABOVE_CEILING"],
        "location": ["LOCATION_NOT_COVERED"],
        "residency": ["RESIDENCY_TOO_SHORT"],
        "strand": ["STRAND_NOT_ALLOWED"],
    }


def test_failed_gates_accumulate_reasons() -> None:
    df = pd.DataFrame([_row("strict", min_gwa=95.0, income_ceiling=100000.0)])

    eligible_df, ineligible_df = apply_eligibility_filter(df, _profile(), today=TODAY)

    assert eligible_df.empty
    assert ineligible_df.iloc[0]["reasons"] == ["GWA_BELOW_MIN", "INCOME_ABOVE_CEILING"]


def test_boundaries_are_inclusive() -> None:
    df = pd.DataFrame(
        [
            _row(
                "edge",
                application_deadline=TODAY,
                min_gwa=88.0,
                income_ceiling=200000.0,
                nationwide=False,
                city_ids=[2],
                min_residency_years=4,
            )
        ]
    )

    eligible_df, ineligible_df = apply_eligibility_filter(df, _profile(), today=TODAY)

    assert eligible_df["scholarship_id"].tolist() == ["edge"]
    assert ineligible_df.empty


def test_gwa_below_minimum_is_excluded() -> None:
    df = pd.DataFrame([_row("dost", min_gwa=85.0)])

    eligible_df, ineligible_df = apply_eligibility_filter(df, _profile(gwa=80.0), today=TODAY)

    assert eligible_df.empty
    assert ineligible_df["scholarship_id"].tolist() == ["dost"]


def test_location_gate_accepts_any_matching_granularity() -> None:
    df = pd.DataFrame(
        [
            _row("region", nationwide=False, region_ids=[13], city_ids=[99]),
            _row("province", nationwide=False, province_ids=[1]),
            _row("nationwide_with_lists", nationwide=True, city_ids=[99]),
            _row("empty_lists", nationwide=False, region_ids=[], province_ids=[], city_ids=[]),
            _row("elsewhere", nationwide=False, region_ids=[4], province_ids=[2]),
        ]
    )

    eligible_df, ineligible_df = apply_eligibility_filter(df, _profile(), today=TODAY)

    assert eligible_df["scholarship_id"].tolist() == [
        "region",
        "province",
        "nationwide_with_lists",
        "empty_lists",
    ]
    assert ineligible_df["scholarship_id"].tolist() == ["elsewhere"]


def test_location_constrained_scholarship_excludes_student_without_location() -> None:
    df = pd.DataFrame([_row("city_only", nationwide=False, city_ids=[2])])

    eligible_df, _ = apply_eligibility_filter(df, _profile(location=LocationRef()), today=TODAY)

    assert eligible_df.empty


def test_residency_gate_is_skipped_when_residency_is_unknown() -> None:
    df = pd.DataFrame([_row("lgu", nationwide=False, city_ids=[2], min_residency_years=3)])

    eligible_df, _ = apply_eligibility_filter(df, _profile(residency_years=None), today=TODAY)

    assert eligible_df["scholarship_id"].tolist() == ["lgu"]


def test_student_without_strand_passes_strand_gate() -> None:
    df = pd.DataFrame([_row("abm_only", allowed_strands=["ABM"])])

    eligible_df, _ = apply_eligibility_filter(df, _profile(strand=None), today=TODAY)

    assert eligible_df["scholarship_id"].tolist() == ["abm_only"]


def test_missing_deadline_is_treated_as_passed() -> None:
    df = pd.DataFrame([_row("no_deadline", application_deadline=None)])

    _, ineligible_df = apply_eligibility_filter(df, _profile(), today=TODAY)

    assert ineligible_df.iloc[0]["reasons"] == ["DEADLINE_PASSED"]


def test_raising_gwa_never_removes_an_eligible_scholarship() -> None:
    df = pd.DataFrame(
        [
            _row("a", min_gwa=80.0),
            _row("b", min_gwa=90.0),
            _row("c"),
        ]
    )

    lower_df, _ = apply_eligibility_filter(df, _profile(gwa=85.0), today=TODAY)
    higher_df, _ = apply_eligibility_filter(df, _profile(gwa=95.0), today=TODAY)

    assert set(lower_df["scholarship_id"]) <= set(higher_df["scholarship_id"])
    assert higher_df["scholarship_id"].tolist() == ["a", "b", "c"]
