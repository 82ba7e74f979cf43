from __future__ import annotations

from datetime import date

import pandas as pd

from src.normalize.schema import ScholarshipRecord, StudentProfile

DEADLINE_PASSED = "DEADLINE_PASSED"
NOT_OPEN = "NOT_OPEN"
GWA_BELOW_MIN = "GWA_BELOW_MIN"
INCOME_ABOVE_CEILING = "INCOME_ABOVE_CEILING"
LOCATION_NOT_COVERED = "LOCATION_NOT_COVERED"
RESIDENCY_TOO_SHORT = "RESIDENCY_TOO_SHORT"
STRAND_NOT_ALLOWED = "STRAND_NOT_ALLOWED"


def passes_location_gate(record: ScholarshipRecord, profile: StudentProfile) -> bool:
    constraints = record.location_constraints
    if constraints.nationwide or not constraints.has_area_lists:
        return True

    location = profile.location
    # Any single granularity match qualifies; there is no region -> province -> city chain check.
    return any(
        ids is not None and value is not None and value in ids
        for ids, value in (
            (constraints.region_ids, location.region_id),
            (constraints.province_ids, location.province_id),
            (constraints.city_ids, location.city_id),
        )
    )


def passes_strand_gate(record: ScholarshipRecord, profile: StudentProfile) -> bool:
    allowed = record.eligibility.allowed_strands
    if not allowed or profile.strand is None:
        return True
    return profile.strand in allowed


def record_reasons(record: ScholarshipRecord, profile: StudentProfile, today: date) -> list[str]:
    reasons: list[str] = []

    if record.application_deadline is None or record.application_deadline < today:
        reasons.append(DEADLINE_PASSED)
    if record.status != "open":
        reasons.append(NOT_OPEN)

    min_gwa = record.eligibility.min_gwa
    if min_gwa is not None and profile.gwa < min_gwa:
        reasons.append(GWA_BELOW_MIN)

    income_ceiling = record.eligibility.income_ceiling
    if income_ceiling is not None and profile.annual_household_income > income_ceiling:
        reasons.append(INCOME_ABOVE_CEILING)

    if not passes_location_gate(record, profile):
        reasons.append(LOCATION_NOT_COVERED)

    min_residency = record.location_constraints.min_residency_years
    if min_residency is not None and profile.residency_years is not None:
        if profile.residency_years < min_residency:
            reasons.append(RESIDENCY_TOO_SHORT)

    if not passes_strand_gate(record, profile):
        reasons.append(STRAND_NOT_ALLOWED)

    return reasons


def apply_eligibility_filter(
    df: pd.DataFrame, profile: StudentProfile, today: date | None = None
) -> tuple[pd.DataFrame, pd.DataFrame]:
    effective_today = today or date.today()

    with_reasons_df = df.copy()
    with_reasons_df["reasons"] = pd.Series(
        [
            record_reasons(ScholarshipRecord.from_row(row), profile, effective_today)
            for _, row in with_reasons_df.iterrows()
        ],
        index=with_reasons_df.index,
        dtype=object,
    )

    is_ineligible = with_reasons_df["reasons"].map(bool).astype(bool)
    ineligible_df = with_reasons_df[is_ineligible].copy()
    eligible_df = with_reasons_df[~is_ineligible].drop(columns=["reasons"]).copy()

    return eligible_df, ineligible_df
