from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping
from uuid import uuid4

import pandas as pd

from src.normalize.constants import LGU_PROVIDERS, SUBMITTED_DOCUMENT_STATUSES
from src.normalize.schema import (
    SCHOLARSHIP_COLUMNS,
    coerce_date,
    coerce_optional_int,
    flatten_scholarship_payload,
    is_missing,
)

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = [
    "student_id",
    "first_name",
    "last_name",
    "email",
    "gwa",
    "annual_household_income",
    "shs_type",
    "strand",
    "intended_course",
    "city_id",
    "residency_years",
    "is_pwd",
    "is_solo_parent_child",
    "is_indigenous",
]
DOCUMENT_COLUMNS = ["student_id", "document_type", "status"]
CITY_COLUMNS = ["city_id", "name", "province_id", "is_city"]
PROVINCE_COLUMNS = ["province_id", "name", "region_id"]
REGION_COLUMNS = ["region_id", "name"]

TABLE_COLUMNS: dict[str, list[str]] = {
    "scholarships": SCHOLARSHIP_COLUMNS,
    "students": STUDENT_COLUMNS,
    "student_documents": DOCUMENT_COLUMNS,
    "cities": CITY_COLUMNS,
    "provinces": PROVINCE_COLUMNS,
    "regions": REGION_COLUMNS,
}
CITY_SEARCH_LIMIT = 20


def _prepare_table(records: pd.DataFrame | Iterable[Mapping[str, Any]] | None, columns: list[str]) -> pd.DataFrame:
    if records is None:
        return pd.DataFrame(columns=columns)
    df = records.copy() if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
    for column in columns:
        if column not in df.columns:
            df[column] = None
    return df.reset_index(drop=True)


def _prepare_scholarships(records: pd.DataFrame | Iterable[Mapping[str, Any]] | None) -> pd.DataFrame:
    if records is None:
        return pd.DataFrame(columns=SCHOLARSHIP_COLUMNS)
    if isinstance(records, pd.DataFrame):
        return _prepare_table(records, SCHOLARSHIP_COLUMNS)
    return pd.DataFrame(
        [flatten_scholarship_payload(record) for record in records],
        columns=SCHOLARSHIP_COLUMNS,
    )


def _row_to_dict(row: pd.Series) -> dict[str, Any]:
    return {key: (None if is_missing(value) else value) for key, value in row.to_dict().items()}


def _lookup(df: pd.DataFrame, column: str, value: Any) -> dict[str, Any] | None:
    if df.empty or value is None:
        return None
    matches = df[df[column].astype(str) == str(value)]
    if matches.empty:
        return None
    return _row_to_dict(matches.iloc[0])


def _lookup_id(df: pd.DataFrame, column: str, value: Any) -> dict[str, Any] | None:
    """Integer-keyed lookup; tolerates ids that were widened to floats by missing values."""

    if df.empty or value is None:
        return None
    matches = df[pd.to_numeric(df[column], errors="coerce") == value]
    if matches.empty:
        return None
    return _row_to_dict(matches.iloc[0])


def _iso_date(value: Any) -> str | None:
    resolved = coerce_date(value)
    return resolved.isoformat() if resolved else None


def _benefits_text(value: Any) -> str | None:
    if is_missing(value):
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


@dataclass(slots=True)
class CatalogStore:
    """In-memory tables standing in for the relational store the matching engine reads."""

    scholarships: pd.DataFrame
    students: pd.DataFrame
    student_documents: pd.DataFrame
    cities: pd.DataFrame
    provinces: pd.DataFrame
    regions: pd.DataFrame

    @classmethod
    def from_records(
        cls,
        *,
        scholarships: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
        students: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
        student_documents: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
        cities: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
        provinces: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
        regions: pd.DataFrame | Iterable[Mapping[str, Any]] | None = None,
    ) -> CatalogStore:
        return cls(
            scholarships=_prepare_scholarships(scholarships),
            students=_prepare_table(students, STUDENT_COLUMNS),
            student_documents=_prepare_table(student_documents, DOCUMENT_COLUMNS),
            cities=_prepare_table(cities, CITY_COLUMNS),
            provinces=_prepare_table(provinces, PROVINCE_COLUMNS),
            regions=_prepare_table(regions, REGION_COLUMNS),
        )

    def get_student_row(self, student_id: str) -> dict[str, Any] | None:
        return _lookup(self.students, "student_id", student_id)

    def get_uploaded_document_types(self, student_id: str) -> frozenset[str]:
        if self.student_documents.empty:
            return frozenset()
        docs = self.student_documents
        mask = (docs["student_id"].astype(str) == str(student_id)) & docs["status"].isin(
            SUBMITTED_DOCUMENT_STATUSES
        )
        return frozenset(str(value) for value in docs.loc[mask, "document_type"] if not is_missing(value))

    def get_student_documents(self, student_id: str) -> list[dict[str, Any]]:
        if self.student_documents.empty:
            return []
        docs = self.student_documents
        matches = docs[docs["student_id"].astype(str) == str(student_id)]
        return [_row_to_dict(row) for _, row in matches.iterrows()]

    def get_scholarship_row(self, scholarship_id: str) -> dict[str, Any] | None:
        return _lookup(self.scholarships, "scholarship_id", scholarship_id)

    def get_city_details(self, city_id: Any) -> dict[str, Any] | None:
        resolved_id = coerce_optional_int(city_id)
        city = _lookup_id(self.cities, "city_id", resolved_id)
        if city is None:
            return None

        province = _lookup_id(self.provinces, "province_id", coerce_optional_int(city.get("province_id"))) or {}
        region = _lookup_id(self.regions, "region_id", coerce_optional_int(province.get("region_id"))) or {}
        lgu_info = LGU_PROVIDERS.get(resolved_id)
        return {
            "city": {"id": resolved_id, "name": city.get("name"), "is_city": bool(city.get("is_city"))},
            "province": {"id": coerce_optional_int(province.get("province_id")), "name": province.get("name")},
            "region": {"id": coerce_optional_int(region.get("region_id")), "name": region.get("name")},
            "has_lgu_scholarship": lgu_info is not None,
            "lgu_info": dict(lgu_info) if lgu_info else None,
        }

    def search_cities(self, query: str, *, limit: int = CITY_SEARCH_LIMIT) -> list[dict[str, Any]]:
        needle = query.strip().lower()
        if not needle or self.cities.empty:
            return []

        names = self.cities["name"].fillna("").astype(str)
        hits = self.cities[names.str.lower().str.contains(needle, regex=False)]
        hits = hits.assign(_name=names[hits.index]).sort_values("_name", kind="mergesort").head(limit)

        results: list[dict[str, Any]] = []
        for _, row in hits.iterrows():
            details = self.get_city_details(row["city_id"])
            if details is None:
                continue
            results.append(
                {
                    "id": details["city"]["id"],
                    "name": details["city"]["name"],
                    "is_city": details["city"]["is_city"],
                    "province": details["province"]["name"],
                    "region": details["region"]["name"],
                    "display_name": f"{details['city']['name']}, {details['province']['name']}",
                    "has_lgu_scholarship": details["has_lgu_scholarship"],
                }
            )
        return results

    def list_open_scholarships(self, today: date) -> pd.DataFrame:
        """Storage-level pre-filter: open status and deadline not yet passed, nearest deadline first."""

        df = self.scholarships
        if df.empty:
            return df.copy()

        deadlines = df["application_deadline"].map(coerce_date)
        statuses = df["status"].fillna("open").astype(str).str.lower()
        mask = deadlines.map(lambda value: value is not None and value >= today) & (statuses == "open")
        open_df = df[mask.astype(bool)].copy()
        open_df["_deadline_sort"] = pd.to_datetime(deadlines[open_df.index], errors="coerce")
        open_df = open_df.sort_values("_deadline_sort", kind="mergesort").drop(columns=["_deadline_sort"])
        logger.debug("Catalog pre-filter kept %d of %d scholarships", len(open_df), len(df))
        return open_df.reset_index(drop=True)


def _load_table(data_dir: Path, table: str) -> pd.DataFrame | list[dict[str, Any]] | None:
    parquet_path = data_dir / f"{table}.parquet"
    if parquet_path.exists():
        return pd.read_parquet(parquet_path)

    json_path = data_dir / f"{table}.json"
    if json_path.exists():
        if table == "scholarships":
            # Nested eligibility bags are flattened record-by-record.
            return pd.read_json(json_path, orient="records", dtype=False).to_dict(orient="records")
        return pd.read_json(json_path, orient="records", dtype=False)
    return None


def load_catalog_store(data_dir: Path) -> CatalogStore:
    if not data_dir.exists():
        raise FileNotFoundError(f"Catalog data directory not found: {data_dir}")

    tables = {table: _load_table(data_dir, table) for table in TABLE_COLUMNS}
    if tables["scholarships"] is None:
        raise FileNotFoundError(
            f"No scholarships table in '{data_dir}'. Expected scholarships.parquet or scholarships.json."
        )
    store = CatalogStore.from_records(**tables)
    logger.info(
        "Loaded catalog from %s: scholarships=%d students=%d cities=%d",
        data_dir,
        len(store.scholarships),
        len(store.students),
        len(store.cities),
    )
    return store


def write_parquet_atomic(df: pd.DataFrame, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        df.to_parquet(temp_path, index=False, engine="pyarrow")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def write_catalog_snapshot(store: CatalogStore, output_dir: Path) -> list[Path]:
    written: list[Path] = []
    for table in TABLE_COLUMNS:
        df = getattr(store, table)
        if table == "scholarships":
            df = df.copy()
            for column in ("application_deadline", "application_start"):
                df[column] = df[column].map(_iso_date)
            # Benefit bags vary in shape per provider; stored as JSON text.
            df["benefits"] = df["benefits"].map(_benefits_text)
        output_path = output_dir / f"{table}.parquet"
        write_parquet_atomic(df, output_path)
        written.append(output_path)
    return written
