from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any

import pandas as pd

from src.match.deadlines import days_remaining, is_urgent, urgency_level
from src.match.explain import explain_breakdown
from src.match.weights import ScoringWeights
from src.normalize.schema import MatchResult, ScholarshipRecord, StudentProfile

HIGH_MATCH_PERCENTAGE = 70
MEDIUM_MATCH_PERCENTAGE = 40


def missing_documents(required: tuple[str, ...] | list[str], uploaded: frozenset[str]) -> list[str]:
    return [document for document in required if document not in uploaded]


def sort_matches(scored_df: pd.DataFrame) -> pd.DataFrame:
    """Score descending; ties go to the nearer deadline, then name, then id."""

    sortable_df = scored_df.copy()
    sortable_df["_deadline_sort"] = pd.to_datetime(sortable_df.get("application_deadline"), errors="coerce")
    sortable_df["_name_sort"] = sortable_df.get("name", pd.Series(dtype=object)).fillna("").astype(str)
    sortable_df["_id_sort"] = sortable_df.get("scholarship_id", pd.Series(dtype=object)).astype(str)
    sortable_df = sortable_df.sort_values(
        by=["match_score", "_deadline_sort", "_name_sort", "_id_sort"],
        ascending=[False, True, True, True],
        na_position="last",
        kind="mergesort",
    ).drop(columns=["_deadline_sort", "_name_sort", "_id_sort"])
    return sortable_df.reset_index(drop=True)


def assemble_matches(
    scored_df: pd.DataFrame,
    profile: StudentProfile,
    today: date | None = None,
    *,
    include_documents: bool = True,
) -> pd.DataFrame:
    if "match_score" not in scored_df.columns:
        raise ValueError("Result assembly requires a 'match_score' column.")

    effective_today = today or date.today()
    assembled_df = sort_matches(scored_df)

    records = [ScholarshipRecord.from_row(row) for _, row in assembled_df.iterrows()]
    days = [days_remaining(record.application_deadline, effective_today) for record in records]
    assembled_df["days_remaining"] = pd.Series(days, index=assembled_df.index, dtype=object)
    assembled_df["is_urgent"] = [is_urgent(value) for value in days]
    assembled_df["urgency_level"] = pd.Series(
        [urgency_level(value) for value in days], index=assembled_df.index, dtype=object
    )
    if include_documents:
        assembled_df["missing_documents"] = pd.Series(
            [missing_documents(record.required_documents, profile.uploaded_document_types) for record in records],
            index=assembled_df.index,
            dtype=object,
        )
    return assembled_df


def to_match_results(
    assembled_df: pd.DataFrame, weights: ScoringWeights | None = None
) -> list[MatchResult]:
    results: list[MatchResult] = []
    has_documents = "missing_documents" in assembled_df.columns
    for _, row in assembled_df.iterrows():
        breakdown = dict(row["scoring_breakdown"])
        record = ScholarshipRecord.from_row(row)
        days = row.get("days_remaining")
        results.append(
            MatchResult(
                scholarship=record.to_output_dict(),
                match_score=int(row["match_score"]),
                match_percentage=int(row["match_percentage"]),
                scoring_breakdown={**breakdown, "total_score": int(row["match_score"])},
                days_remaining=None if days is None or pd.isna(days) else int(days),
                is_urgent=bool(row.get("is_urgent")),
                urgency_level=row.get("urgency_level"),
                missing_documents=list(row["missing_documents"]) if has_documents else None,
                match_reasons=explain_breakdown(breakdown, weights),
            )
        )
    return results


def build_summary(matches: list[MatchResult]) -> dict[str, Any]:
    provider_counts = Counter(
        match.scholarship.get("provider_type") or "Unknown" for match in matches
    )
    return {
        "high_matches": sum(1 for match in matches if match.match_percentage >= HIGH_MATCH_PERCENTAGE),
        "medium_matches": sum(
            1
            for match in matches
            if MEDIUM_MATCH_PERCENTAGE <= match.match_percentage < HIGH_MATCH_PERCENTAGE
        ),
        "low_matches": sum(1 for match in matches if match.match_percentage < MEDIUM_MATCH_PERCENTAGE),
        "urgent_deadlines": sum(1 for match in matches if match.is_urgent),
        "by_provider_type": dict(sorted(provider_counts.items())),
    }
