"""Tests for catalog loading and record normalisation."""

from __future__ import annotations

import json

import pytest

from src.functions.content_generation.core.catalog import convert_record, convert_records, load_catalog
from tests.content_generation.fixtures import SAMPLE_CARS, SAMPLE_TOURS


def test_convert_tour_record() -> None:
    product = convert_record(SAMPLE_TOURS[0], "tour")

    assert product.id == "tour-001"
    assert product.slug == "kemer-boat-tour"
    assert product.region == "Kemer"
    assert product.price == 850.0
    assert product.rating == 4.8
    assert product.review_count == 120
    assert product.images == ["https://cdn.example.com/kemer-1.jpg"]


def test_convert_record_fallbacks() -> None:
    product = convert_record(SAMPLE_TOURS[1], "tour")

    assert product.name == "Perge Ruins Walk"
    assert product.region == "Antalya"
    assert product.price == 400.0
    assert product.slug == "tour-002"
    assert product.review_count is None


def test_convert_car_record_uses_slug_and_model_name() -> None:
    product = convert_record(SAMPLE_CARS[0], "car-rental")

    assert product.id == "car-fiat-egea"
    assert product.name == "Fiat Egea"
    assert product.price == 1200.0
    assert product.review_count == 37


def test_convert_record_without_identifier_is_skipped() -> None:
    assert convert_record({"name": "Nameless"}, "hotel") is None


def test_convert_record_with_invalid_rating_is_skipped() -> None:
    assert convert_record({"id": "hotel-1", "name": "Hotel", "rating": 11}, "hotel") is None


def test_convert_records_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="Unknown product category"):
        convert_records(SAMPLE_TOURS, "cruise")


def test_convert_records_ignores_non_objects() -> None:
    products = convert_records([SAMPLE_TOURS[0], "junk", 42], "tour")

    assert [product.id for product in products] == ["tour-001"]


def test_load_catalog(tmp_path) -> None:
    path = tmp_path / "tours.json"
    path.write_text(json.dumps(SAMPLE_TOURS), encoding="utf-8")

    products = load_catalog(path, "tour")

    assert [product.id for product in products] == ["tour-001", "tour-002"]
    assert {product.category for product in products} == {"tour"}


def test_load_catalog_requires_array(tmp_path) -> None:
    path = tmp_path / "tours.json"
    path.write_text(json.dumps({"tours": SAMPLE_TOURS}), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON array"):
        load_catalog(path, "tour")
