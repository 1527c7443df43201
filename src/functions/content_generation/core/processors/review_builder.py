"""Normalise raw LLM review payloads into ``Review`` records."""

from __future__ import annotations

import logging
import random
import re
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..contracts import Review

logger = logging.getLogger(__name__)

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def build_reviews(
    product_id: str,
    locale: str,
    raw_reviews: Iterable[Any],
    *,
    rng: Optional[random.Random] = None,
) -> list[Review]:
    """Attach ids, avatars and engagement counters to raw reviews.

    Entries that are not objects or lack an author/text are skipped.
    """
    rng = rng or random.Random()
    reviews: list[Review] = []

    for raw in raw_reviews:
        if not isinstance(raw, dict):
            continue
        author = str(raw.get("author") or "").strip()
        text = str(raw.get("text") or "").strip()
        if not author or not text:
            continue
        try:
            review = Review(
                id=f"{product_id}-review-{len(reviews) + 1}",
                author=author,
                avatar=AVATAR_URL.format(seed=re.sub(r"\s", "", author)),
                rating=raw.get("rating", 5),
                date=str(raw.get("date") or ""),
                title=str(raw.get("title") or ""),
                text=text,
                helpful=rng.randint(20, 219),
                verified=rng.random() > 0.3,
                locale=locale,
            )
        except ValidationError as exc:
            logger.debug("Skipping malformed review for %s: %s", product_id, exc)
            continue
        reviews.append(review)

    return reviews
