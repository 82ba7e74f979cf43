"""Catalog storage: table loading, lookups and parquet snapshots."""

from src.io.catalog_store import CatalogStore, load_catalog_store, write_catalog_snapshot

__all__ = ["CatalogStore", "load_catalog_store", "write_catalog_snapshot"]
