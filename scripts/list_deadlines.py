from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.catalog_store import load_catalog_store
from src.match.deadlines import deadline_calendar, get_scholarship_deadline, list_deadlines
from src.match.errors import ScholarshipNotFoundError
from src.normalize.constants import PROVIDER_TYPES

DEFAULT_DATA_DIR = Path("data/seed")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List upcoming scholarship deadlines with urgency levels.")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="Catalog data directory.")
    parser.add_argument("--today", type=str, default=None, help="Evaluation date in YYYY-MM-DD format.")
    parser.add_argument("--scholarship-id", type=str, default=None, help="Show a single scholarship deadline.")
    parser.add_argument("--urgent-only", action="store_true", help="Only deadlines within 14 days.")
    parser.add_argument("--provider-type", choices=PROVIDER_TYPES, default=None, help="Filter by provider type.")
    parser.add_argument("--sort-by", choices=("deadline", "name"), default="deadline")
    parser.add_argument("--limit", type=int, default=50)
    parser.add_argument("--offset", type=int, default=0)
    parser.add_argument(
        "--calendar",
        nargs=2,
        metavar=("START", "END"),
        default=None,
        help="Group open scholarships by deadline between two YYYY-MM-DD dates instead of listing them.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    data_dir = args.data_dir if args.data_dir.is_absolute() else ROOT_DIR / args.data_dir
    store = load_catalog_store(data_dir)
    today = date.fromisoformat(args.today) if args.today else None

    if args.scholarship_id is not None:
        try:
            payload = get_scholarship_deadline(store, args.scholarship_id, today=today)
        except ScholarshipNotFoundError as exc:
            print(json.dumps(exc.to_dict(), indent=2))
            return 2
        print(json.dumps(payload, indent=2))
        return 0

    if args.calendar is not None:
        start, end = (date.fromisoformat(value) for value in args.calendar)
        print(json.dumps(deadline_calendar(store, start, end), indent=2))
        return 0

    listing = list_deadlines(
        store,
        today=today,
        urgent_only=args.urgent_only,
        provider_type=args.provider_type,
        sort_by=args.sort_by,
        limit=args.limit,
        offset=args.offset,
    )
    print(json.dumps(listing, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
