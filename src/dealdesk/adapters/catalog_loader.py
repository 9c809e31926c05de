# src/dealdesk/adapters/catalog_loader.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dealdesk.adapters.config import config
from dealdesk.adapters.logging_utils import get_logger
from dealdesk.domain.catalog import DEFAULT_CATALOG, LenderCatalog

logger = get_logger(__name__)


def load_catalog(path: str | Path) -> LenderCatalog:
    """
    Load a lender catalog from JSON:

      {"version": "2025.2", "lenders": [{...LenderCriteria...}, ...]}

    Raises FileNotFoundError for a missing file and pydantic.ValidationError
    for a malformed one; a bad catalog should stop startup, not degrade.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Lender catalog not found at {p}")
    catalog = LenderCatalog.model_validate_json(p.read_text(encoding="utf-8"))
    logger.info(
        "lender_catalog_loaded",
        extra={"context": {"path": str(p), "version": catalog.version, "lenders": len(catalog.lenders)}},
    )
    return catalog


def dump_catalog(catalog: LenderCatalog, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(catalog.model_dump_json(indent=2), encoding="utf-8")
    return p


@lru_cache(maxsize=1)
def get_active_catalog() -> LenderCatalog:
    if config.LENDER_CATALOG_PATH:
        return load_catalog(config.LENDER_CATALOG_PATH)
    return DEFAULT_CATALOG
