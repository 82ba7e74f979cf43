from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.catalog_store import load_catalog_store
from src.match.engine import match_scholarships, quick_match
from src.match.errors import NotFoundError, ProfileValidationError
from src.match.weights import ScoringWeights

DEFAULT_DATA_DIR = Path("data/seed")
EXIT_NOT_FOUND = 2
EXIT_INVALID_PROFILE = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Match a student profile against the scholarship catalog.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--student-id", type=str, help="Persisted student id for a full match.")
    target.add_argument(
        "--quick-profile",
        type=Path,
        help="JSON file with a quick-scan profile (gwa, annual_income, shs_type, city_id, ...).",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help=f"Catalog directory of <table>.parquet or <table>.json files. Defaults to {DEFAULT_DATA_DIR}.",
    )
    parser.add_argument(
        "--weights",
        type=Path,
        default=None,
        help="Optional JSON scoring weight overrides.",
    )
    parser.add_argument(
        "--today",
        type=str,
        default=None,
        help="Evaluation date in YYYY-MM-DD format. Defaults to the current date.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum matches returned by a quick match. Defaults to 50.",
    )
    return parser.parse_args(argv)


def _resolve_path(path: Path) -> Path:
    return path if path.is_absolute() else ROOT_DIR / path


def _load_weights(weights_path: Path | None) -> ScoringWeights | None:
    if weights_path is None:
        return None
    payload = json.loads(_resolve_path(weights_path).read_text(encoding="utf-8"))
    return ScoringWeights.from_mapping(payload)


def _coerce_today(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise SystemExit(f"--today must be in YYYY-MM-DD format, got '{value}'.") from exc


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = load_catalog_store(_resolve_path(args.data_dir))
    weights = _load_weights(args.weights)
    today = _coerce_today(args.today)

    report: dict[str, Any]
    try:
        if args.student_id is not None:
            report = match_scholarships(args.student_id, store=store, weights=weights, today=today)
        else:
            payload = json.loads(_resolve_path(args.quick_profile).read_text(encoding="utf-8"))
            report = quick_match(payload, store=store, weights=weights, today=today, limit=args.limit)
    except NotFoundError as exc:
        print(json.dumps(exc.to_dict(), indent=2))
        return EXIT_NOT_FOUND
    except ProfileValidationError as exc:
        print(json.dumps(exc.to_dict(), indent=2))
        return EXIT_INVALID_PROFILE

    print(json.dumps(report, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
