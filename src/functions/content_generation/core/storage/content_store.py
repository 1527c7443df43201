"""Filesystem sink for generated content artifacts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from src.shared.batch import atomic_write_json, read_json
from ..contracts import GeneratedContent, task_key

logger = logging.getLogger(__name__)


def bucket_for(product_id: str) -> str:
    """Category bucket of a product id: the prefix before the first '-'."""
    return product_id.split("-", 1)[0]


class ContentStore:
    """Writes one JSON file per (product, locale) under ``<output_dir>/<bucket>/``."""

    def __init__(self, output_dir: Path | str):
        self.output_dir = Path(output_dir)

    def path_for(self, product_id: str, locale: str) -> Path:
        return self.output_dir / bucket_for(product_id) / f"{task_key(product_id, locale)}.json"

    def save(self, content: GeneratedContent) -> Path:
        """Persist an artifact, overwriting any earlier file for the same pair."""
        filepath = self.path_for(content.product_id, content.locale)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(filepath, content.to_json_dict())
        logger.debug("Saved content for %s to %s", content.product_id, filepath)
        return filepath

    def load(self, product_id: str, locale: str) -> Optional[GeneratedContent]:
        data = read_json(self.path_for(product_id, locale))
        if data is None:
            return None
        try:
            return GeneratedContent.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid content file for %s (%s): %s", product_id, locale, exc)
            return None

    def summarize(self) -> Dict[str, Dict[str, Any]]:
        """File counts per bucket with one sample artifact each."""
        summary: Dict[str, Dict[str, Any]] = {}
        if not self.output_dir.exists():
            return summary

        for bucket_dir in sorted(self.output_dir.iterdir()):
            if not bucket_dir.is_dir():
                continue
            files = sorted(bucket_dir.glob("*.json"))
            entry: Dict[str, Any] = {"files": len(files), "sample": None}
            if files:
                sample = read_json(files[0]) or {}
                entry["sample"] = {
                    "title": sample.get("title"),
                    "locale": sample.get("locale"),
                    "keywords": (sample.get("seo") or {}).get("keywords", [])[:3],
                }
            summary[bucket_dir.name] = entry
        return summary
