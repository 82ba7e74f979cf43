from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.normalize.validation import ValidationResult


class ProfileValidationError(ValueError):
    """Raised before matching when profile fields fail validation."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        fields = ", ".join(problem["field"] for problem in result.errors) or "profile"
        super().__init__(f"Invalid profile fields: {fields}")

    @property
    def problems(self) -> list[dict[str, str]]:
        return list(self.result.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": "VALIDATION_FAILED", **self.result.to_dict()}


class NotFoundError(LookupError):
    entity = "record"
    code = "NOT_FOUND"

    def __init__(self, identifier: Any) -> None:
        self.identifier = identifier
        super().__init__(f"{self.entity.capitalize()} not found: {identifier}")

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.code, "message": str(self)}


class StudentNotFoundError(NotFoundError):
    entity = "student"
    code = "STUDENT_NOT_FOUND"


class ScholarshipNotFoundError(NotFoundError):
    entity = "scholarship"
    code = "SCHOLARSHIP_NOT_FOUND"


class CityNotFoundError(NotFoundError):
    entity = "city"
    code = "CITY_NOT_FOUND"
