from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Iterable

from src.match.errors import StudentNotFoundError
from src.normalize.constants import DOCUMENT_DISPLAY_NAMES, DOCUMENT_TYPES, SUBMITTED_DOCUMENT_STATUSES

if TYPE_CHECKING:
    from src.io.catalog_store import CatalogStore

logger = logging.getLogger(__name__)

# Lower bound of completion percentage for each readiness tier, checked in order.
READINESS_TIERS: tuple[tuple[str, int, str], ...] = (
    ("complete", 100, "All documents are ready! You can now apply to scholarships."),
    ("almost", 75, "Almost there! Just a few more documents to complete."),
    ("halfway", 50, "You're halfway done. Keep going!"),
    ("started", 1, "You've started! Continue uploading your documents."),
)
EMPTY_READINESS = ("empty", "Start by uploading your documents to the vault.")


def display_name(document_type: str) -> str:
    return DOCUMENT_DISPLAY_NAMES.get(document_type, document_type)


def completion_percentage(ready: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(ready / total * 100.0 + 0.5))


def readiness_message(ready: int, total: int) -> dict[str, str]:
    percentage = completion_percentage(ready, total)
    for status, lower_bound, message in READINESS_TIERS:
        if percentage >= lower_bound:
            return {"status": status, "message": message}
    status, message = EMPTY_READINESS
    return {"status": status, "message": message}


def _document_entry(document_type: str, row: dict[str, Any] | None) -> dict[str, Any]:
    status = (row or {}).get("status") or "pending"
    entry: dict[str, Any] = {
        "document_type": document_type,
        "display_name": display_name(document_type),
        "status": status,
        "is_ready": status in SUBMITTED_DOCUMENT_STATUSES,
        "is_verified": status == "verified",
    }
    if row is not None:
        for key in ("file_name", "uploaded_at", "verified_at", "rejection_reason"):
            entry[key] = row.get(key)
    return entry


def vault_status(store: CatalogStore, student_id: str) -> dict[str, Any]:
    """Per-type status of the student's document vault, with completion counts and a readiness tier.

    Every known document type is listed; types the student never submitted are
    reported as pending. When a type has several rows, the first one wins.
    """

    if store.get_student_row(student_id) is None:
        logger.warning("Vault status requested for unknown student %s", student_id)
        raise StudentNotFoundError(student_id)

    rows_by_type: dict[str, dict[str, Any]] = {}
    for row in store.get_student_documents(student_id):
        rows_by_type.setdefault(str(row.get("document_type")), row)

    documents = [_document_entry(document_type, rows_by_type.get(document_type)) for document_type in DOCUMENT_TYPES]
    total = len(DOCUMENT_TYPES)
    ready = sum(1 for document in documents if document["is_ready"])
    verified = sum(1 for document in documents if document["is_verified"])

    return {
        "student_id": student_id,
        "total_required": total,
        "completion": {
            "ready": ready,
            "verified": verified,
            "pending": sum(1 for document in documents if document["status"] == "pending"),
            "rejected": sum(1 for document in documents if document["status"] == "rejected"),
            "percentage": completion_percentage(ready, total),
        },
        "is_complete": ready == total,
        "is_fully_verified": verified == total,
        "documents": documents,
        "missing_documents": [
            document["document_type"] for document in documents if document["status"] == "pending"
        ],
        "rejected_documents": [
            {"document_type": document["document_type"], "reason": document.get("rejection_reason")}
            for document in documents
            if document["status"] == "rejected"
        ],
        "readiness": readiness_message(ready, total),
    }


def check_document_eligibility(
    store: CatalogStore, student_id: str, required_documents: Iterable[str]
) -> dict[str, Any]:
    required = list(required_documents)
    ready_types = {
        document["document_type"] for document in vault_status(store, student_id)["documents"] if document["is_ready"]
    }
    missing = [document_type for document_type in required if document_type not in ready_types]

    if missing:
        message = f"Missing {len(missing)} document(s): {', '.join(display_name(doc) for doc in missing)}"
    else:
        message = "You have all required documents for this scholarship!"

    return {
        "is_eligible": not missing,
        "required_documents": [
            {
                "document_type": document_type,
                "display_name": display_name(document_type),
                "is_ready": document_type in ready_types,
            }
            for document_type in required
        ],
        "missing_documents": [
            {"document_type": document_type, "display_name": display_name(document_type)}
            for document_type in missing
        ],
        "message": message,
    }
