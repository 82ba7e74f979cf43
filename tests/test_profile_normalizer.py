from __future__ import annotations

import pytest

from src.normalize.profile import (
    build_quick_profile,
    build_student_profile,
    normalize_document_types,
    normalize_gwa,
    profile_value,
)
from src.normalize.schema import LocationRef

CITY_DETAILS = {
    "city": {"id": 2, "name": "Makati", "is_city": True},
    "province": {"id": 1, "name": "Metro Manila"},
    "region": {"id": 13, "name": "National Capital Region"},
    "has_lgu_scholarship": True,
    "lgu_info": None,
}


def test_normalize_gwa_converts_inverted_scale() -> None:
    assert normalize_gwa(1.75) == 88.0
    assert normalize_gwa(1.1) == pytest.approx(95.8)
    assert normalize_gwa(4.0) == 72.5
    assert normalize_gwa(92) == 92.0
    assert normalize_gwa(None) is None


def test_build_student_profile_canonicalizes_row() -> None:
    profile = build_student_profile(
        {
            "student_id": "stu-1",
            "first_name": "Maria",
            "last_name": "Santos",
            "gwa": "2.00",
            "annual_household_income": 180000,
            "shs_type": "public",
            "strand": "stem",
            "intended_course": " Computer Science ",
            "city_id": 2,
            "residency_years": 6.0,
            "is_pwd": "true",
            "is_solo_parent_child": 0,
        },
        city_details=CITY_DETAILS,
        uploaded_document_types=["PSA", "form138", "Passport"],
    )

    assert profile.gwa == 85.0
    assert profile.shs_type == "Public"
    assert profile.strand == "STEM"
    assert profile.intended_course == "Computer Science"
    assert profile.location == LocationRef(region_id=13, province_id=1, city_id=2)
    assert profile.residency_years == 6
    assert profile.special_statuses.is_pwd is True
    assert profile.special_statuses.is_solo_parent_child is False
    assert profile.uploaded_document_types == frozenset({"PSA", "Form138"})
    assert profile.full_name == "Maria Santos"


def test_build_quick_profile_reads_camel_case_payload() -> None:
    profile = build_quick_profile(
        {"gwa": 91, "annualIncome": 150000, "shsType": "Private", "cityId": 2, "intendedCourse": "Nursing"},
        city_details=CITY_DETAILS,
    )

    assert profile.annual_household_income == 150000.0
    assert profile.shs_type == "Private"
    assert profile.intended_course == "Nursing"
    assert profile.location.region_id == 13
    assert profile.residency_years is None
    assert profile.uploaded_document_types == frozenset()


def test_build_quick_profile_without_city_details_keeps_city_id_only() -> None:
    profile = build_quick_profile({"gwa": 91, "annual_income": 0, "shs_type": "Public", "city_id": "7"})

    assert profile.location == LocationRef(city_id=7)
    assert profile.annual_household_income == 0.0


def test_profile_value_prefers_first_present_key() -> None:
    payload = {"annual_income": None, "annualHouseholdIncome": 5}

    assert profile_value(payload, "annual_income", "annual_household_income") == 5
    assert profile_value(payload, "missing") is None


def test_normalize_document_types_handles_none() -> None:
    assert normalize_document_types(None) == frozenset()


def test_stored_student_without_residency_counts_as_zero_years() -> None:
    profile = build_student_profile({"gwa": 90, "annual_household_income": 100000, "shs_type": "Public"})

    assert profile.residency_years == 0
