from __future__ import annotations

from src.normalize.validation import (
    suggest_courses,
    validate_coordinates,
    validate_course,
    validate_document_status,
    validate_document_type,
    validate_email,
    validate_full_profile,
    validate_gwa,
    validate_income,
    validate_quick_scan_profile,
    validate_residency_years,
    validate_shs_type,
    validate_strand,
)


def _fields(problems: list[dict[str, str]]) -> list[str]:
    return [problem["field"] for problem in problems]


def test_validate_gwa_ranges() -> None:
    assert validate_gwa(90).to_dict()["error_count"] == 0
    assert validate_gwa(None).errors[0]["message"] == "GWA is required"
    assert validate_gwa("abc").errors[0]["message"] == "GWA must be a valid number"
    assert validate_gwa(65).errors[0]["message"] == "GWA must be at least 70"
    assert validate_gwa(101).errors[0]["message"] == "GWA cannot exceed 100"

    low = validate_gwa(72)
    assert low.is_valid
    assert _fields(low.warnings) == ["gwa"]


def test_validate_gwa_converts_inverted_scale_with_warning() -> None:
    converted = validate_gwa(1.75)

    assert converted.is_valid
    assert "converted to 88" in converted.warnings[0]["message"]

    weak = validate_gwa(4.0)
    assert weak.is_valid
    assert len(weak.warnings) == 2


def test_validate_income() -> None:
    assert validate_income(0).is_valid
    assert validate_income("").errors[0]["field"] == "annual_income"
    assert not validate_income(-1).is_valid
    assert not validate_income(60_000_000).is_valid
    assert not validate_income("lots").is_valid


def test_validate_shs_type_and_strand() -> None:
    assert validate_shs_type("public").is_valid
    assert not validate_shs_type("Homeschool").is_valid
    assert not validate_shs_type(None).is_valid
    assert validate_strand(None).is_valid
    assert validate_strand("stem").is_valid
    assert not validate_strand("Robotics").is_valid


def test_validate_course_exact_partial_and_multiple_matches() -> None:
    exact = validate_course("nursing")
    assert exact.is_valid
    assert exact.warnings == []

    single = validate_course("Psycholog")
    assert single.is_valid
    assert single.suggested_course == "Psychology"

    multiple = validate_course("Engineering")
    assert multiple.is_valid
    assert multiple.course_suggestions == [
        "Civil Engineering",
        "Mechanical Engineering",
        "Electrical Engineering",
        "Electronics Engineering",
        "Chemical Engineering",
    ]

    assert validate_course(None).is_valid


def test_validate_course_suggests_close_programs_for_misspellings() -> None:
    result = validate_course("Computr Sciense")

    assert not result.is_valid
    assert _fields(result.errors) == ["intended_course"]
    assert "Computer Science" in result.course_suggestions
    assert len(result.course_suggestions) <= 5
    assert result.to_dict()["course_suggestions"] == result.course_suggestions


def test_suggest_courses_is_empty_for_blank_query() -> None:
    assert suggest_courses("   ") == []


def test_validate_residency_years() -> None:
    assert validate_residency_years(None).is_valid
    assert validate_residency_years(0).is_valid
    assert not validate_residency_years(-1).is_valid
    assert not validate_residency_years(51).is_valid


def test_validate_documents_and_email() -> None:
    assert validate_document_type("PSA").is_valid
    assert not validate_document_type("Passport").is_valid
    assert validate_document_status("verified").is_valid
    assert not validate_document_status("lost").is_valid
    assert validate_email("maria@example.com").is_valid
    assert not validate_email("maria@").is_valid


def test_validate_coordinates_warns_outside_philippines() -> None:
    assert validate_coordinates(14.5547, 121.0244).to_dict() == {
        "is_valid": True,
        "errors": [],
        "warnings": [],
        "error_count": 0,
        "warning_count": 0,
    }
    assert _fields(validate_coordinates(35.68, 139.69).warnings) == ["coordinates"]
    assert _fields(validate_coordinates(100, 121).errors) == ["latitude"]
    assert _fields(validate_coordinates(None, "x").errors) == ["latitude", "longitude"]


def test_validate_quick_scan_profile_accepts_camel_case_keys() -> None:
    result = validate_quick_scan_profile({"gwa": 90, "annualIncome": 100000, "shsType": "Public"})

    assert result.is_valid


def test_validate_quick_scan_profile_collects_every_error() -> None:
    result = validate_quick_scan_profile({"gwa": 50, "shs_type": "Online", "residency_years": 80})

    assert _fields(result.errors) == ["gwa", "annual_income", "shs_type", "residency_years"]


def test_validate_full_profile_requires_names_and_valid_email() -> None:
    result = validate_full_profile(
        {"gwa": 90, "annual_income": 100000, "shs_type": "Private", "first_name": " ", "email": "nope"}
    )

    assert _fields(result.errors) == ["first_name", "last_name", "email"]
