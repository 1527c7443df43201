"""Prompt templates for localized product content generation."""

from __future__ import annotations

from textwrap import dedent

from .contracts import LANGUAGE_NAMES, Product

CONTENT_SYSTEM_PROMPT = (
    "You are an expert travel content writer with deep knowledge of Turkish tourism. "
    "You write compelling, accurate, and SEO-optimized content in multiple languages."
)

# Extra sections requested per category: (numbered instructions, JSON field sketch)
CATEGORY_SECTIONS: dict[str, tuple[str, str]] = {
    "tour": (
        "5. INCLUDED ITEMS (6-10 items, what's included in price)\n"
        "6. EXCLUDED ITEMS (4-6 items, what's NOT included)\n"
        "7. ITINERARY (3-5 time-based activities with descriptions)",
        '"included": ["string", ...],\n'
        '  "excluded": ["string", ...],\n'
        '  "itinerary": [{"time": "HH:MM", "title": "string", "description": "string"}, ...]',
    ),
    "hotel": (
        "5. AMENITIES (8-12 hotel amenities)\n"
        "6. ROOM FEATURES (6-8 room features)",
        '"amenities": ["string", ...],\n'
        '  "roomFeatures": ["string", ...]',
    ),
    "car-rental": (
        "5. INCLUDED SERVICES (6-8 items)\n"
        "6. ADDITIONAL OPTIONS (4-6 optional add-ons)",
        '"included": ["string", ...],\n'
        '  "additionalOptions": ["string", ...]',
    ),
    "rental": (
        "5. PROPERTY FEATURES (8-10 features)\n"
        "6. HOUSE RULES (4-6 rules)",
        '"features": ["string", ...],\n'
        '  "houseRules": ["string", ...]',
    ),
    "transfer": (
        "5. INCLUDED SERVICES (6-8 items)\n"
        "6. VEHICLE FEATURES (4-6 features)",
        '"included": ["string", ...],\n'
        '  "vehicleFeatures": ["string", ...]',
    ),
}


def language_name(locale: str) -> str:
    return LANGUAGE_NAMES.get(locale, locale)


def build_content_prompt(product: Product, locale: str) -> str:
    """Main prompt: title, descriptions, highlights and category fields."""

    language = language_name(locale)
    additional_fields, json_fields = CATEGORY_SECTIONS.get(product.category, ("", ""))

    sections = [
        f"You are a professional travel content writer specializing in {product.category} descriptions.",
        f"Generate comprehensive, engaging content for the following {product.category}:",
        dedent(
            f"""\
            Product Details:
            - Name: {product.name}
            - Region: {product.region}, Turkey
            - Category: {product.category}
            - Base Description: {product.description}
            - Price: {product.price:g} TRY"""
        ),
        f"Language: {language}",
        "\n".join(
            line
            for line in (
                f"Create content in {language} with:",
                "1. TITLE (40-60 characters, SEO-friendly)",
                "2. SHORT DESCRIPTION (150-160 characters for meta)",
                "3. LONG DESCRIPTION (300-500 words, engaging and informative)",
                "4. HIGHLIGHTS (6-8 bullet points, unique selling points)",
                additional_fields,
            )
            if line
        ),
        dedent(
            f"""\
            Guidelines:
            - Write naturally in {language}
            - Focus on benefits and unique experiences
            - Include local cultural references
            - Highlight safety, quality, and value
            - SEO-friendly but not keyword-stuffed
            - Avoid clichés and generic phrases"""
        ),
    ]

    json_lines = [
        '  "title": "string"',
        '  "description": "string"',
        '  "longDescription": "string"',
        '  "highlights": ["string", "string", ...]',
    ]
    if json_fields:
        json_lines.append(f"  {json_fields}")
    sections.append("Return ONLY valid JSON in this exact format:\n{\n" + ",\n".join(json_lines) + "\n}")
    return "\n\n".join(sections)


def build_keywords_prompt(product: Product, title: str, locale: str) -> str:
    return dedent(
        f"""
        Generate 10-15 SEO keywords in {language_name(locale)} for:

        Product: {title}
        Category: {product.category}
        Location: {product.region}

        Return ONLY a JSON object: {{"keywords": ["keyword1", "keyword2", ...]}}
        """
    ).strip()


def build_reviews_prompt(product: Product, locale: str, count: int) -> str:
    return dedent(
        f"""
        Generate {count} realistic customer reviews in {language_name(locale)} for:

        Product: {product.name}
        Category: {product.category}
        Location: {product.region}

        Each review should:
        - Be authentic and specific
        - Mention real details
        - Vary in tone (enthusiastic, balanced, critical-but-positive)
        - Be 50-150 words

        Return ONLY a JSON object:
        {{"reviews": [{{"author": "Name Surname", "rating": 4, "title": "Short review title",
          "text": "Detailed review text", "date": "YYYY-MM-DD"}}]}}
        """
    ).strip()
