"""
Test data and fakes for content generation tests.

Provides sample catalog records, product builders and scripted backends for
exercising the batch processor without calling OpenAI.
"""

import json
import threading
import time
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from src.functions.content_generation.core.contracts import GeneratedContent, Product
from src.functions.content_generation.core.processors import build_seo_metadata

SAMPLE_TOURS = [
    {
        "id": "tour-001",
        "slug": "kemer-boat-tour",
        "name": "Kemer Boat Tour",
        "description": "Full day boat trip along the Kemer coast.",
        "region": "Kemer",
        "pricing": {"travelLyDian": 850},
        "images": ["https://cdn.example.com/kemer-1.jpg"],
        "rating": 4.8,
        "reviewCount": 120,
    },
    {
        "id": "tour-002",
        "title": "Perge Ruins Walk",
        "price": 400,
        "rating": 4.1,
    },
]

SAMPLE_CARS = [
    {
        "slug": "car-fiat-egea",
        "model": {"tr": "Fiat Egea", "en": "Fiat Egea Sedan"},
        "pricing": {"daily": 1200},
        "totalRentals": 37,
        "rating": 4.5,
    },
]

MAIN_PAYLOAD = {
    "title": "Kemer Boat Tour with Lunch",
    "description": "Sail turquoise bays near Kemer with swimming stops and lunch on board.",
    "longDescription": "A relaxed day on the water visiting hidden coves.",
    "highlights": ["Swim stops", " ", "Fresh lunch"],
    "included": ["Lunch", "Hotel pickup"],
    "excluded": ["Drinks"],
    "itinerary": [{"time": "09:00", "title": "Pickup", "description": "Hotel pickup"}],
}

KEYWORDS_PAYLOAD = {"keywords": ["kemer boat tour", "antalya boat trip", " ", "kemer coves"]}

REVIEWS_PAYLOAD = {
    "reviews": [
        {"author": "Ayse Yilmaz", "rating": 5, "title": "Great day", "text": "Loved it.", "date": "2024-06-01"},
        {"author": "", "text": "No author"},
        "not-a-review",
        {"author": "John Smith", "rating": 4, "text": "Good value."},
    ]
}


def make_product(
    product_id: str = "tour-001",
    category: str = "tour",
    rating: Optional[float] = None,
    **overrides: Any,
) -> Product:
    data: Dict[str, Any] = {
        "id": product_id,
        "category": category,
        "region": "Antalya",
        "name": f"Product {product_id}",
        "description": "Sample product",
        "price": 500.0,
        "rating": rating,
    }
    data.update(overrides)
    return Product(**data)


def make_content(product: Product, locale: str) -> GeneratedContent:
    title = f"{product.name} ({locale})"
    return GeneratedContent(
        product_id=product.id,
        locale=locale,
        title=title,
        description="Short description",
        long_description="Long description",
        highlights=["One"],
        seo=build_seo_metadata(
            product,
            locale,
            title=title,
            description="Short description",
            long_description="Long description",
            keywords=["sample"],
        ),
    )


class FakeBackend:
    """Scripted backend: fails a task key a set number of times, then succeeds.

    ``failures`` maps task keys to the number of leading failures; a value of
    ``-1`` fails forever.
    """

    def __init__(self, failures: Optional[Dict[str, int]] = None, delay: float = 0.0):
        self.failures = dict(failures or {})
        self.delay = delay
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def generate(self, product: Product, locale: str) -> GeneratedContent:
        key = f"{product.id}-{locale}"
        with self._lock:
            self.calls.append(key)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            remaining = self.failures.get(key, 0)
            if remaining > 0:
                self.failures[key] = remaining - 1
        try:
            if self.delay:
                time.sleep(self.delay)
            if remaining != 0:
                raise RuntimeError(f"backend unavailable for {key}")
            return make_content(product, locale)
        finally:
            with self._lock:
                self.active -= 1

    def calls_for(self, key: str) -> int:
        return self.calls.count(key)


class FakeCompletions:
    """Mimics ``client.chat.completions`` returning queued JSON strings."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> SimpleNamespace:
        self.requests.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        content = response if isinstance(response, str) or response is None else json.dumps(response)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self, responses: List[Any]):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)
        self.timeouts: List[float] = []

    def with_options(self, **kwargs: Any) -> "FakeOpenAIClient":
        self.timeouts.append(kwargs.get("timeout"))
        return self
