from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.catalog_store import load_catalog_store
from src.match.documents import check_document_eligibility, vault_status
from src.match.errors import NotFoundError, ScholarshipNotFoundError
from src.normalize.schema import ScholarshipRecord

DEFAULT_DATA_DIR = Path("data/seed")
EXIT_NOT_FOUND = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show a student's document vault readiness.")
    parser.add_argument("--student-id", type=str, required=True, help="Persisted student id.")
    parser.add_argument(
        "--scholarship-id",
        type=str,
        default=None,
        help="Check the vault against one scholarship's required documents instead.",
    )
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="Catalog data directory.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    data_dir = args.data_dir if args.data_dir.is_absolute() else ROOT_DIR / args.data_dir
    store = load_catalog_store(data_dir)

    try:
        if args.scholarship_id is None:
            payload = vault_status(store, args.student_id)
        else:
            row = store.get_scholarship_row(args.scholarship_id)
            if row is None:
                raise ScholarshipNotFoundError(args.scholarship_id)
            record = ScholarshipRecord.from_row(row)
            payload = {
                "scholarship_id": record.scholarship_id,
                **check_document_eligibility(store, args.student_id, record.required_documents),
            }
    except NotFoundError as exc:
        print(json.dumps(exc.to_dict(), indent=2))
        return EXIT_NOT_FOUND

    print(json.dumps(payload, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
