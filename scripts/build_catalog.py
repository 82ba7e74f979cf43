from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.io.catalog_store import load_catalog_store, write_catalog_snapshot


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a JSON catalog directory into parquet tables.")
    parser.add_argument(
        "--input-dir",
        type=Path,
        default=Path("data/seed"),
        help="Directory of <table>.json (or .parquet) files.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("data/processed"),
        help="Directory for the parquet tables.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    input_dir = args.input_dir if args.input_dir.is_absolute() else ROOT_DIR / args.input_dir
    output_dir = args.output_dir if args.output_dir.is_absolute() else ROOT_DIR / args.output_dir
    store = load_catalog_store(input_dir)
    written = write_catalog_snapshot(store, output_dir)

    for path in written:
        print(f"Wrote table: {path}")
    print(f"Scholarships: {len(store.scholarships)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
