#!/usr/bin/env python3
"""Command-line interface for batch product content generation.

Generates localized page content (copy, SEO metadata, reviews) for every
product in the supplied catalogs across the configured locales. Progress is
checkpointed to ``<output-dir>/progress.json`` so an interrupted run resumes
where it stopped.

Examples:
    # Quick test: first 10 products, all 8 locales
    python generate_content_cli.py --task generate --catalog tour=data/tours.json --end 10

    # Full run over several catalogs with 20 workers
    python generate_content_cli.py --task generate \\
        --catalog tour=data/tours.json --catalog car-rental=data/cars.json --concurrency 20

    # Inspect progress of the current output directory
    python generate_content_cli.py --task progress

    # Show generated files per category
    python generate_content_cli.py --task content
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[4]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.shared.batch import read_json
from src.shared.utils.config_validator import (
    ConfigurationError,
    require_env,
    validate_float_env,
    validate_int_env,
)
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging
from src.functions.content_generation.core.catalog import load_catalog
from src.functions.content_generation.core.contracts import (
    PRODUCT_CATEGORIES,
    TASK_STATUSES,
    GenerationOptions,
    Product,
    ProductStats,
    parse_locales,
)
from src.functions.content_generation.core.llm import OpenAIContentGenerator
from src.functions.content_generation.core.pipelines import BatchConfig, BatchProcessor
from src.functions.content_generation.core.storage import (
    PROGRESS_FILENAME,
    ContentStore,
    ProgressPersistenceError,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "generated-content"
MAX_ERRORS_SHOWN = 10


def setup_cli_parser() -> argparse.ArgumentParser:
    """Set up command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Batch generation of localized product content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate content for the first 50 tours
  python generate_content_cli.py --task generate --catalog tour=data/tours.json --end 50

  # Only German and English pages, no confirmation prompt
  python generate_content_cli.py --task generate --catalog hotel=data/hotels.json --locales de,en --yes

  # Progress report
  python generate_content_cli.py --task progress --output-dir ./generated-content

Configuration:
  Set OPENAI_API_KEY in environment or .env file
  Optional: CONTENT_CONCURRENCY, CONTENT_RETRY_ATTEMPTS, CONTENT_RETRY_DELAY,
            CONTENT_OUTPUT_DIR, OPENAI_CONTENT_MODEL
        """,
    )

    parser.add_argument(
        "--task",
        choices=["generate", "progress", "content"],
        required=True,
        help="Task to perform: generate, progress, or content",
    )

    parser.add_argument(
        "--catalog",
        action="append",
        default=[],
        metavar="CATEGORY=PATH",
        help=f"Catalog JSON file for a category ({', '.join(PRODUCT_CATEGORIES)}); repeatable",
    )

    parser.add_argument(
        "--locales",
        type=str,
        help="Comma-separated locale codes (default: all 8)",
    )

    parser.add_argument(
        "--start",
        type=int,
        default=0,
        help="Index of the first product to include (default: 0)",
    )

    parser.add_argument(
        "--end",
        type=int,
        help="Index after the last product to include (default: all)",
    )

    parser.add_argument(
        "--concurrency",
        type=int,
        help="Number of concurrent workers (default: 10 or CONTENT_CONCURRENCY)",
    )

    parser.add_argument(
        "--retry-attempts",
        type=int,
        help="Retries per task after the first attempt (default: 3)",
    )

    parser.add_argument(
        "--retry-delay",
        type=float,
        help="Base retry delay in seconds, multiplied by the retry number (default: 5)",
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help=f"Output directory for content and progress (default: ./{DEFAULT_OUTPUT_DIR})",
    )

    parser.add_argument(
        "--model",
        type=str,
        help="OpenAI model for the main content call",
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level explicitly",
    )

    return parser


def parse_catalog_specs(values: List[str]) -> List[Tuple[str, Path]]:
    """Split ``CATEGORY=PATH`` arguments.

    Raises:
        ValueError: On a malformed value or unknown category
    """
    catalogs = []
    for value in values:
        category, sep, path = value.partition("=")
        category = category.strip()
        if not sep or not path.strip():
            raise ValueError(f"Invalid --catalog value '{value}'. Expected CATEGORY=PATH")
        if category not in PRODUCT_CATEGORIES:
            raise ValueError(
                f"Unknown category '{category}' in --catalog. Expected one of: {', '.join(PRODUCT_CATEGORIES)}"
            )
        catalogs.append((category, Path(path.strip())))
    return catalogs


def load_products(values: List[str], start: int = 0, end: Optional[int] = None) -> List[Product]:
    products: List[Product] = []
    for category, path in parse_catalog_specs(values):
        products.extend(load_catalog(path, category))
    return products[start:end]


def resolve_output_dir(args: argparse.Namespace) -> Path:
    return args.output_dir or Path(os.getenv("CONTENT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR))


def build_batch_config(args: argparse.Namespace) -> BatchConfig:
    """Merge CLI flags over environment defaults.

    Raises:
        ConfigurationError: If an environment value is invalid
    """
    concurrency = args.concurrency
    if concurrency is None:
        concurrency = validate_int_env("CONTENT_CONCURRENCY", default=10, min_value=1, max_value=100)
    retry_attempts = args.retry_attempts
    if retry_attempts is None:
        retry_attempts = validate_int_env("CONTENT_RETRY_ATTEMPTS", default=3, min_value=0, max_value=10)
    retry_delay = args.retry_delay
    if retry_delay is None:
        retry_delay = validate_float_env("CONTENT_RETRY_DELAY", default=5.0, min_value=0.0)

    if concurrency < 1:
        raise ConfigurationError("--concurrency must be at least 1")
    if retry_attempts < 0:
        raise ConfigurationError("--retry-attempts must not be negative")
    if retry_delay < 0:
        raise ConfigurationError("--retry-delay must not be negative")

    return BatchConfig(
        concurrency=concurrency,
        retry_attempts=retry_attempts,
        retry_delay=retry_delay,
        output_dir=resolve_output_dir(args),
    )


def render_progress_bar(percent: float, width: int = 40) -> str:
    filled = int(max(0.0, min(percent, 100.0)) / 100 * width)
    return f"[{'█' * filled}{'░' * (width - filled)}]"


def print_summary(stats: ProductStats, output_dir: Path) -> None:
    minutes, seconds = divmod(int(stats.duration_seconds), 60)
    total = stats.total_pages or 1

    print("\n" + "=" * 60)
    print("CONTENT GENERATION COMPLETE")
    print("=" * 60)
    print(f"Duration:          {minutes}m {seconds}s")
    print(f"Total pages:       {stats.total_pages}")
    print(f"Completed:         {stats.completed_pages} ({stats.completed_pages / total * 100:.0f}%)")
    print(f"Failed:            {stats.failed_pages}")
    print(f"Pending:           {stats.by_status.get('pending', 0)}")
    if stats.completed_pages:
        print(f"Avg time/page:     {stats.average_seconds_per_page:.1f}s")

    print("\nBy category:")
    for category, count in stats.by_category.items():
        print(f"  {category:<15}: {count} pages")

    print("\nBy language:")
    for locale, count in stats.by_language.items():
        print(f"  {locale.upper():<15}: {count} pages")

    if stats.errors:
        print(f"\nErrors ({len(stats.errors)}):")
        for error in stats.errors[:MAX_ERRORS_SHOWN]:
            print(f"  {error.item}: {error.error}")
        if len(stats.errors) > MAX_ERRORS_SHOWN:
            print(f"  ... and {len(stats.errors) - MAX_ERRORS_SHOWN} more")

    print(f"\nOutput: {output_dir}")
    print("=" * 60)


def handle_generate(args: argparse.Namespace) -> int:
    """Run the batch and return the process exit code."""
    if not args.catalog:
        logger.error("At least one --catalog CATEGORY=PATH is required for generate")
        return 1

    try:
        api_key = require_env("OPENAI_API_KEY", "OpenAI content generation")
        config = build_batch_config(args)
        locales = parse_locales(args.locales)
        products = load_products(args.catalog, args.start, args.end)
    except (ConfigurationError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    if not products:
        logger.error("No products selected from the supplied catalogs")
        return 1

    print("\n" + "=" * 60)
    print("STARTING CONTENT GENERATION")
    print("=" * 60)
    print(f"Products:     {len(products)}")
    print(f"Languages:    {', '.join(locales)}")
    print(f"Total pages:  {len(products) * len(locales)}")
    print(f"Concurrency:  {config.concurrency} workers")

    if not args.yes:
        answer = input("\nContinue? (y/n): ")
        if answer.strip().lower() != "y":
            print("Generation cancelled")
            return 0

    model = args.model or os.getenv("OPENAI_CONTENT_MODEL") or GenerationOptions().model
    generator = OpenAIContentGenerator(api_key=api_key, model=model)
    processor = BatchProcessor(generator, config)

    try:
        stats = processor.process_all_products(products, locales)
    except ProgressPersistenceError as e:
        logger.error("Generation failed: %s", e)
        return 1

    print_summary(stats, config.output_dir)
    return 1 if stats.has_failures else 0


def handle_progress(args: argparse.Namespace) -> int:
    progress_file = resolve_output_dir(args) / PROGRESS_FILENAME
    tasks = read_json(progress_file)
    if not isinstance(tasks, dict) or not tasks:
        print("\nNo progress file found. Run generation first.")
        return 1

    counts = {status: 0 for status in TASK_STATUSES}
    for task in tasks.values():
        status = task.get("status") if isinstance(task, dict) else None
        if status in counts:
            counts[status] += 1

    total = len(tasks)
    percent = counts["completed"] / total * 100

    print("\n" + "=" * 60)
    print("PROGRESS REPORT")
    print("=" * 60)
    print(f"Total tasks:   {total}")
    print(f"Completed:     {counts['completed']} ({percent:.0f}%)")
    print(f"Failed:        {counts['failed']}")
    print(f"Pending:       {counts['pending']}")
    print(f"Processing:    {counts['processing']}")
    print(f"\n{render_progress_bar(percent, width=50)} {percent:.0f}%")
    return 0


def handle_content(args: argparse.Namespace) -> int:
    summary = ContentStore(resolve_output_dir(args)).summarize()
    if not summary:
        print("\nNo generated content found. Run generation first.")
        return 1

    print("\n" + "=" * 60)
    print("GENERATED CONTENT")
    print("=" * 60)
    for bucket, entry in summary.items():
        print(f"{bucket.upper()}: {entry['files']} files")
        sample = entry.get("sample")
        if sample:
            print(f"  Sample:   {sample.get('title')}")
            print(f"  Locale:   {sample.get('locale')}")
            print(f"  Keywords: {', '.join(sample.get('keywords') or [])}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = setup_cli_parser()
    args = parser.parse_args(argv)

    load_env()

    if args.log_level:
        log_level = args.log_level
    elif args.verbose:
        log_level = "DEBUG"
    else:
        log_level = "INFO"

    setup_logging(level=log_level)

    handlers = {
        "generate": handle_generate,
        "progress": handle_progress,
        "content": handle_content,
    }
    sys.exit(handlers[args.task](args))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
