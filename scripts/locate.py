from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.catalog_store import CITY_SEARCH_LIMIT, load_catalog_store
from src.location.geocode import process_location, validate_lgu_residency
from src.normalize.validation import validate_coordinates, validate_residency_years

DEFAULT_DATA_DIR = Path("data/seed")
EXIT_NOT_FOUND = 2
EXIT_INVALID_INPUT = 3

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve a student's city from coordinates or a name search.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--coordinates", nargs=2, metavar=("LAT", "LNG"), help="Latitude and longitude.")
    target.add_argument("--city-query", type=str, help="Case-insensitive city name search against the catalog.")
    parser.add_argument(
        "--residency-years",
        type=str,
        default=None,
        help="Years lived in the resolved city; checked against its LGU scholarship when one exists.",
    )
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR, help="Catalog data directory.")
    parser.add_argument("--limit", type=int, default=CITY_SEARCH_LIMIT, help="Maximum city search results.")
    return parser.parse_args(argv)


def _locate(latitude: str, longitude: str, residency_years: str | None) -> tuple[int, dict[str, Any]]:
    validation = validate_coordinates(latitude, longitude)
    if residency_years is not None:
        validation.merge(validate_residency_years(residency_years))
    if not validation.is_valid:
        return EXIT_INVALID_INPUT, {"success": False, "error": "VALIDATION_FAILED", **validation.to_dict()}

    result = process_location(latitude, longitude)
    if validation.warnings:
        result["warnings"] = list(validation.warnings)
    if not result["success"]:
        logger.warning("No known city near %s, %s", latitude, longitude)
        return EXIT_NOT_FOUND, result

    if residency_years is not None and result["has_lgu_scholarship"]:
        result["residency_check"] = validate_lgu_residency(result["location"]["city"]["id"], residency_years)
    return 0, result


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.city_query is not None:
        data_dir = args.data_dir if args.data_dir.is_absolute() else ROOT_DIR / args.data_dir
        store = load_catalog_store(data_dir)
        cities = store.search_cities(args.city_query, limit=args.limit)
        print(json.dumps({"success": True, "count": len(cities), "cities": cities}, indent=2))
        return 0

    exit_code, payload = _locate(args.coordinates[0], args.coordinates[1], args.residency_years)
    print(json.dumps(payload, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
