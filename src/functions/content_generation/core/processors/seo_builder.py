"""SEO metadata and schema.org structured data for generated pages."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from ..contracts import Product, SEOMetadata

BASE_URL = "https://holiday.ailydian.com"
SITE_NAME = "Holiday AILYDIAN"
ORGANIZATION_NAME = "AILYDIAN Holiday"
CURRENCY = "TRY"

CATEGORY_PATHS = {
    "tour": "tours",
    "hotel": "hotels",
    "car-rental": "car-rentals",
    "rental": "rentals",
    "transfer": "transfers",
    "flight": "flights",
}

SCHEMA_TYPES = {
    "tour": "TouristTrip",
    "hotel": "Hotel",
    "car-rental": "RentalCarReservation",
    "rental": "LodgingBusiness",
    "transfer": "Service",
    "flight": "Flight",
}


def canonical_url(product: Product, locale: str) -> str:
    return f"{BASE_URL}/{locale}/{CATEGORY_PATHS[product.category]}/{product.slug or product.id}"


def build_structured_data(
    product: Product,
    *,
    title: str,
    long_description: str,
    url: str,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Schema.org JSON-LD object for a product page."""

    valid_from = (now or datetime.now(timezone.utc)).isoformat()
    data: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": SCHEMA_TYPES[product.category],
        "name": title,
        "description": long_description,
        "image": list(product.images),
        "url": url,
        "offers": {
            "@type": "Offer",
            "price": product.price,
            "priceCurrency": CURRENCY,
            "availability": "https://schema.org/InStock",
            "validFrom": valid_from,
        },
        "provider": {
            "@type": "Organization",
            "name": ORGANIZATION_NAME,
            "url": BASE_URL,
        },
    }

    if product.rating:
        data["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": product.rating,
            "reviewCount": product.review_count or 0,
            "bestRating": 5,
            "worstRating": 1,
        }

    return data


def build_seo_metadata(
    product: Product,
    locale: str,
    *,
    title: str,
    description: str,
    long_description: str,
    keywords: list[str],
    now: Optional[datetime] = None,
) -> SEOMetadata:
    url = canonical_url(product, locale)
    return SEOMetadata(
        meta_title=f"{title} | {SITE_NAME}",
        meta_description=description,
        keywords=keywords,
        canonical_url=url,
        og_title=title,
        og_description=description,
        og_image=product.images[0] if product.images else "",
        twitter_card="summary_large_image",
        structured_data=build_structured_data(
            product,
            title=title,
            long_description=long_description,
            url=url,
            now=now,
        ),
    )
