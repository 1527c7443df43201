"""Tests for progress and content persistence."""

from __future__ import annotations

import json

import pytest

from src.functions.content_generation.core.contracts import Task
from src.functions.content_generation.core.storage import (
    ContentStore,
    ProgressPersistenceError,
    ProgressStore,
    bucket_for,
)
from tests.content_generation.fixtures import make_content, make_product


def _task(product_id: str = "tour-1", locale: str = "en", **changes) -> Task:
    task = Task.for_product(make_product(product_id), locale)
    return task.model_copy(update=changes) if changes else task


def test_flush_then_load_restores_tasks(tmp_path) -> None:
    store = ProgressStore(tmp_path)
    store.put(_task("tour-1", "en", status="completed"))
    store.put(_task("tour-1", "de", status="failed", retries=3, error="timeout"))
    store.flush()

    restored = ProgressStore(tmp_path)
    assert restored.load() == 2

    failed = restored.get("tour-1-de")
    assert failed.status == "failed"
    assert failed.retries == 3
    assert failed.error == "timeout"
    assert restored.get("tour-1-en").is_completed
    assert "tour-1-en" in restored
    assert len(restored) == 2


def test_flush_writes_camel_case_and_leaves_no_temp_file(tmp_path) -> None:
    store = ProgressStore(tmp_path)
    store.put(_task())
    store.flush()

    data = json.loads((tmp_path / "progress.json").read_text(encoding="utf-8"))
    entry = data["tour-1-en"]
    assert entry["productId"] == "tour-1"
    assert entry["productCategory"] == "tour"
    assert entry["status"] == "pending"
    assert "createdAt" in entry and "updatedAt" in entry
    assert not (tmp_path / "progress.json.tmp").exists()


def test_load_missing_file_yields_empty_map(tmp_path) -> None:
    store = ProgressStore(tmp_path / "nothing-here")
    assert store.load() == 0
    assert store.snapshot() == {}


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]", ""])
def test_load_unusable_file_yields_empty_map(tmp_path, content) -> None:
    (tmp_path / "progress.json").write_text(content, encoding="utf-8")
    store = ProgressStore(tmp_path)
    assert store.load() == 0


def test_load_drops_invalid_entries(tmp_path) -> None:
    valid = _task().to_json_dict()
    (tmp_path / "progress.json").write_text(
        json.dumps({"tour-1-en": valid, "bad-xx": {"productId": "bad", "locale": "xx"}}),
        encoding="utf-8",
    )

    store = ProgressStore(tmp_path)

    assert store.load() == 1
    assert "bad-xx" not in store


def test_update_replaces_task_and_bumps_timestamp(tmp_path) -> None:
    store = ProgressStore(tmp_path)
    original = store.put(_task())

    updated = store.update("tour-1-en", status="processing")

    assert updated.status == "processing"
    assert updated.updated_at >= original.updated_at
    assert original.status == "pending"
    assert store.get("tour-1-en") is updated


def test_increment_retries(tmp_path) -> None:
    store = ProgressStore(tmp_path)
    store.put(_task())

    store.increment_retries("tour-1-en")
    task = store.increment_retries("tour-1-en")

    assert task.retries == 2


def test_update_unknown_key_raises(tmp_path) -> None:
    with pytest.raises(KeyError):
        ProgressStore(tmp_path).update("missing-en", status="failed")


def test_flush_into_missing_directory_raises(tmp_path) -> None:
    store = ProgressStore(tmp_path / "missing")
    store.put(_task())

    with pytest.raises(ProgressPersistenceError):
        store.flush()


def test_ensure_output_dir_on_file_raises(tmp_path) -> None:
    target = tmp_path / "file"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(ProgressPersistenceError):
        ProgressStore(target).ensure_output_dir()


@pytest.mark.parametrize(
    ("product_id", "bucket"),
    [("tour-001", "tour"), ("car-rental-7", "car"), ("standalone", "standalone")],
)
def test_bucket_for(product_id, bucket) -> None:
    assert bucket_for(product_id) == bucket


def test_content_store_save_and_load(tmp_path) -> None:
    store = ContentStore(tmp_path)
    content = make_content(make_product("hotel-9", "hotel"), "fa")

    path = store.save(content)

    assert path == tmp_path / "hotel" / "hotel-9-fa.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["productId"] == "hotel-9"
    assert data["longDescription"] == "Long description"
    assert data["seo"]["canonicalUrl"] == "https://holiday.ailydian.com/fa/hotels/hotel-9"

    loaded = store.load("hotel-9", "fa")
    assert loaded.to_json_dict() == content.to_json_dict()
    assert store.load("hotel-9", "en") is None


def test_content_store_save_overwrites(tmp_path) -> None:
    store = ContentStore(tmp_path)
    product = make_product("tour-1")
    store.save(make_content(product, "en"))
    newer = make_content(product, "en").model_copy(update={"title": "Updated"})

    store.save(newer)

    assert store.load("tour-1", "en").title == "Updated"


def test_content_store_summarize(tmp_path) -> None:
    store = ContentStore(tmp_path)
    store.save(make_content(make_product("tour-1"), "en"))
    store.save(make_content(make_product("tour-2"), "de"))
    store.save(make_content(make_product("hotel-1", "hotel"), "tr"))
    (tmp_path / "progress.json").write_text("{}", encoding="utf-8")

    summary = store.summarize()

    assert set(summary) == {"hotel", "tour"}
    assert summary["tour"]["files"] == 2
    assert summary["tour"]["sample"] == {"title": "Product tour-1 (en)", "locale": "en", "keywords": ["sample"]}
    assert ContentStore(tmp_path / "missing").summarize() == {}
