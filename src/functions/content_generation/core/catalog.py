"""Load raw catalog exports and normalise them into ``Product`` records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .contracts import PRODUCT_CATEGORIES, Product

logger = logging.getLogger(__name__)

DEFAULT_REGION = "Antalya"


def _first(*values: Any) -> Any:
    for value in values:
        if value not in (None, ""):
            return value
    return None


def _nested(record: Dict[str, Any], parent: str, child: str) -> Any:
    block = record.get(parent)
    return block.get(child) if isinstance(block, dict) else None


def convert_record(record: Dict[str, Any], category: str) -> Optional[Product]:
    """Map one catalog record (tour, car, transfer, property) to a Product.

    Returns None when the record has no usable id or fails validation.
    """
    product_id = _first(record.get("id"), record.get("slug"))
    if product_id is None:
        logger.warning("Skipping %s record without id or slug: %s", category, str(record)[:120])
        return None

    name = _first(
        record.get("name"),
        record.get("title"),
        _nested(record, "model", "tr"),
        _nested(record, "model", "en"),
        "Unknown",
    )
    price = _first(
        _nested(record, "pricing", "travelLyDian"),
        _nested(record, "pricing", "daily"),
        record.get("price"),
        0,
    )
    review_count = _first(
        record.get("reviewCount"),
        record.get("totalRentals"),
        record.get("totalTransfers"),
    )

    try:
        return Product(
            id=str(product_id),
            slug=str(_first(record.get("slug"), product_id)),
            category=category,
            region=str(_first(record.get("region"), DEFAULT_REGION)),
            name=str(name),
            description=str(record.get("description") or ""),
            price=float(price),
            images=[str(image) for image in record.get("images") or []],
            rating=record.get("rating"),
            review_count=review_count,
        )
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning("Skipping invalid %s record %s: %s", category, product_id, exc)
        return None


def convert_records(records: Iterable[Dict[str, Any]], category: str) -> List[Product]:
    if category not in PRODUCT_CATEGORIES:
        raise ValueError(f"Unknown product category '{category}'. Expected one of: {', '.join(PRODUCT_CATEGORIES)}")
    products = []
    for record in records:
        if not isinstance(record, dict):
            continue
        product = convert_record(record, category)
        if product is not None:
            products.append(product)
    return products


def load_catalog(path: Path | str, category: str) -> List[Product]:
    """Read a JSON array of catalog records for one category.

    Raises:
        ValueError: If the file is not a JSON array or the category is unknown
        OSError: If the file cannot be read
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Catalog {path} must contain a JSON array of records")
    products = convert_records(data, category)
    logger.info("Loaded %d %s products from %s", len(products), category, path)
    return products
