"""Single-product content generation request handler."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from pydantic import ValidationError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from src.shared.utils.config_validator import ConfigurationError
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging
from src.functions.content_generation.core.contracts import (
    GeneratedContent,
    Product,
    parse_locales,
)
from src.functions.content_generation.core.llm import (
    ContentGenerationError,
    OpenAIContentGenerator,
)

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((ContentGenerationError, ConnectionError, TimeoutError)),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def _generate_with_retry(
    generator: OpenAIContentGenerator,
    product: Product,
    locale: str,
) -> GeneratedContent:
    """Execute generation with automatic retry on transient failures."""
    return generator.generate(product, locale)


def handle_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Generate localized content for one product in one or more locales."""

    if not isinstance(request, dict):
        return {"status": "error", "message": "Request body must be a JSON object"}

    product_input = request.get("product")
    if not isinstance(product_input, dict):
        return {
            "status": "error",
            "message": "Request must include a 'product' object",
        }

    try:
        product = Product.model_validate(product_input)
    except ValidationError as exc:
        return {"status": "error", "message": _format_validation_error(exc)}

    raw_locales = request.get("locales") or request.get("locale")
    if not raw_locales:
        return {
            "status": "error",
            "message": "Target locale must be provided as 'locale' or 'locales'",
        }
    try:
        locales = parse_locales(raw_locales)
    except ValueError as exc:
        return {"status": "error", "message": str(exc)}

    llm_block = request.get("llm") if isinstance(request.get("llm"), dict) else {}
    options = request.get("options") if isinstance(request.get("options"), dict) else None

    try:
        generator = OpenAIContentGenerator(
            api_key=llm_block.get("api_key"),
            model=llm_block.get("model"),
            options=options,
            logger=logger,
        )
    except (ConfigurationError, ValueError) as exc:
        return {"status": "error", "message": str(exc)}

    content: List[Dict[str, Any]] = []
    errors: List[Dict[str, str]] = []
    for locale in locales:
        try:
            generated = _generate_with_retry(generator, product, locale)
        except Exception as exc:  # noqa: BLE001 - report per-locale failures to caller
            logger.error(
                "CONTENT_GENERATION_FAILURE: product=%s locale=%s error=%s: %s",
                product.id,
                locale,
                type(exc).__name__,
                exc,
            )
            errors.append({"locale": locale, "error": str(exc)})
            continue
        content.append(generated.to_json_dict())

    if not content:
        status = "error"
    elif errors:
        status = "partial"
    else:
        status = "success"

    logger.info(
        "CONTENT_GENERATION_COMPLETE: status=%s, product=%s, locales=%d, failed=%d",
        status,
        product.id,
        len(locales),
        len(errors),
    )

    response: Dict[str, Any] = {"status": status, "content": content}
    if errors:
        response["errors"] = errors
    return response


def _format_validation_error(exc: ValidationError) -> str:
    messages: List[str] = []
    for error in exc.errors():
        location = "->".join(str(component) for component in error.get("loc", []))
        if location:
            messages.append(f"{location}: {error.get('msg')}")
        else:
            messages.append(error.get("msg", "Invalid input"))
    return "; ".join(messages)
