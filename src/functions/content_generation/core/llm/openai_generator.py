"""OpenAI client that turns a catalog product into localized page content."""

from __future__ import annotations

import json
import logging
import random
import re
from typing import Any, Optional

from openai import APIError, OpenAI
from pydantic import ValidationError

from src.shared.utils.config_validator import ConfigurationError, check_config_override
from ..contracts import GeneratedContent, GenerationOptions, Product, parse_generation_options
from ..processors import build_reviews, build_seo_metadata
from ..prompts import (
    CONTENT_SYSTEM_PROMPT,
    build_content_prompt,
    build_keywords_prompt,
    build_reviews_prompt,
)

# Category specific keys copied from the main payload (camelCase, as prompted)
CATEGORY_FIELDS: dict[str, tuple[str, ...]] = {
    "tour": ("included", "excluded", "itinerary"),
    "hotel": ("amenities", "roomFeatures"),
    "car-rental": ("included", "additionalOptions"),
    "rental": ("features", "houseRules"),
    "transfer": ("included", "vehicleFeatures"),
}

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


class ContentGenerationError(RuntimeError):
    """Raised when the model call fails or returns unusable output."""


class OpenAIContentGenerator:
    """Wraps chat completions with JSON output for product content.

    One ``generate`` call makes up to three requests: the main content, SEO
    keywords and reviews. Only review failures are tolerated.
    """

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        options: GenerationOptions | dict | None = None,
        client: Any = None,
        logger: Optional[logging.Logger] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        opts = parse_generation_options(options)
        if model:
            opts = opts.model_copy(update={"model": model})
        self._options = opts
        self._logger = logger or logging.getLogger(__name__)
        self._rng = rng or random.Random()

        if client is not None:
            self._client = client
            return

        try:
            api_key = check_config_override(api_key, "OPENAI_API_KEY", required=True)
        except ConfigurationError as e:
            raise ConfigurationError(
                f"{e}\nRequired for content generation. "
                "See .env.example for configuration template."
            )
        self._client = OpenAI(api_key=api_key)

    @property
    def options(self) -> GenerationOptions:
        return self._options

    def generate(self, product: Product, locale: str) -> GeneratedContent:
        """Generate the full page artifact for ``product`` in ``locale``.

        Raises:
            ContentGenerationError: If the content or keywords call fails or
                the result does not match the content contract
        """
        opts = self._options
        client = self._client.with_options(timeout=float(opts.request_timeout_seconds))

        payload = self._complete_json(
            client,
            model=opts.model,
            messages=[
                {"role": "system", "content": CONTENT_SYSTEM_PROMPT},
                {"role": "user", "content": build_content_prompt(product, locale)},
            ],
            temperature=opts.temperature,
            max_tokens=opts.max_output_tokens,
        )

        title = str(payload.get("title") or "").strip()
        description = str(payload.get("description") or "").strip()
        long_description = str(payload.get("longDescription") or "").strip()
        if not title or not description or not long_description:
            raise ContentGenerationError(
                f"Model response for {product.id} ({locale}) is missing title/description/longDescription"
            )

        keywords = self._generate_keywords(client, product, title, locale)
        reviews = self._generate_reviews(client, product, locale)
        seo = build_seo_metadata(
            product,
            locale,
            title=title,
            description=description,
            long_description=long_description,
            keywords=keywords,
        )

        data: dict[str, Any] = {
            field: payload[field]
            for field in CATEGORY_FIELDS.get(product.category, ())
            if payload.get(field) is not None
        }
        data.update(
            productId=product.id,
            locale=locale,
            title=title,
            description=description,
            longDescription=long_description,
            highlights=payload.get("highlights") or [],
            reviews=reviews,
            seo=seo,
        )
        try:
            return GeneratedContent.model_validate(data)
        except ValidationError as exc:
            raise ContentGenerationError(
                f"Generated content for {product.id} ({locale}) failed validation: "
                + "; ".join(error["msg"] for error in exc.errors())
            ) from exc

    def _generate_keywords(self, client: Any, product: Product, title: str, locale: str) -> list[str]:
        payload = self._complete_json(
            client,
            model=self._options.auxiliary_model,
            messages=[{"role": "user", "content": build_keywords_prompt(product, title, locale)}],
            temperature=0.3,
            max_tokens=200,
        )
        raw = payload.get("keywords", [])
        if not isinstance(raw, list):
            return []
        return [str(keyword).strip() for keyword in raw if str(keyword).strip()]

    def _generate_reviews(self, client: Any, product: Product, locale: str) -> list:
        count = self._options.review_count
        if count <= 0:
            return []
        try:
            payload = self._complete_json(
                client,
                model=self._options.auxiliary_model,
                messages=[{"role": "user", "content": build_reviews_prompt(product, locale, count)}],
                temperature=0.8,
                max_tokens=800,
            )
        except ContentGenerationError as exc:
            self._logger.warning("Review generation failed for %s (%s): %s", product.id, locale, exc)
            return []

        raw = payload.get("reviews", [])
        return build_reviews(product.id, locale, raw if isinstance(raw, list) else [], rng=self._rng)

    def _complete_json(
        self,
        client: Any,
        *,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        request_kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        if temperature is not None:
            request_kwargs["temperature"] = temperature
        if max_tokens is not None:
            request_kwargs["max_tokens"] = max_tokens

        try:
            response = client.chat.completions.create(**request_kwargs)
        except APIError as exc:
            raise ContentGenerationError(f"OpenAI API error: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        text = choices[0].message.content if choices else None
        return self._extract_payload(text)

    def _extract_payload(self, text: Optional[str]) -> dict[str, Any]:
        """Parse a JSON object from the response text, tolerating code fences."""
        if not text or not isinstance(text, str):
            raise ContentGenerationError("OpenAI response was empty")

        candidates = [text.strip()]
        match = _FENCED_JSON.search(text)
        if match:
            candidates.append(match.group(1).strip())

        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, dict):
                return parsed

        self._logger.error(
            "JSON_PARSE_FAILURE: Failed to extract JSON object from OpenAI response. Preview: %s",
            text[:500],
        )
        raise ContentGenerationError("OpenAI response did not contain valid JSON payload")
