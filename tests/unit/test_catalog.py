from __future__ import annotations

import json
from pathlib import Path

import pytest

from exmatch.core.catalog import CatalogError, DuplicateSlug, JsonCatalogStore


def _fields(name: str, slug: str, **extra):
    return {"name": name, "slug": slug, **extra}


def test_missing_catalog_file_is_empty(tmp_path: Path) -> None:
    store = JsonCatalogStore(tmp_path / "catalog.json")
    assert store.list_exercises() == []
    assert store.get_exercise(1) is None


def test_create_assigns_next_id_and_persists(catalog_file: Path) -> None:
    store = JsonCatalogStore(catalog_file)

    created = store.create_exercise(_fields("Bird Dog", "bird-dog"))

    assert created.id == 8
    assert created.category == "general"
    saved = json.loads(catalog_file.read_text())
    assert saved["exercises"][-1]["slug"] == "bird-dog"
    assert JsonCatalogStore(catalog_file).get_exercise(8).name == "Bird Dog"


def test_create_rejects_duplicate_slug(catalog_file: Path) -> None:
    store = JsonCatalogStore(catalog_file)
    with pytest.raises(DuplicateSlug) as exc_info:
        store.create_exercise(_fields("Barbell Rows", "barbell-row"))
    assert exc_info.value.slug == "barbell-row"


def test_create_rejects_unknown_category(tmp_path: Path) -> None:
    store = JsonCatalogStore(tmp_path / "catalog.json")
    with pytest.raises(CatalogError, match="Unknown category"):
        store.create_exercise(_fields("Plank", "plank", category="core"))


def test_update_exercise_sets_video(catalog_file: Path) -> None:
    store = JsonCatalogStore(catalog_file)

    updated = store.update_exercise(1, video_id="vid00000001", thumbnail_url="https://example.com/t.jpg")

    assert updated.video_id == "vid00000001"
    assert JsonCatalogStore(catalog_file).get_exercise(1).has_video


def test_update_exercise_rejects_bad_fields(catalog_file: Path) -> None:
    store = JsonCatalogStore(catalog_file)
    with pytest.raises(CatalogError, match="immutable"):
        store.update_exercise(1, slug="other")
    with pytest.raises(CatalogError, match="Unknown exercise field"):
        store.update_exercise(1, colour="red")
    with pytest.raises(CatalogError, match="not found"):
        store.update_exercise(999, video_id="x")


def test_returned_records_are_copies(catalog_file: Path) -> None:
    store = JsonCatalogStore(catalog_file)
    exercise = store.get_exercise(1)
    exercise.name = "Changed"
    assert store.get_exercise(1).name == "Barbell Row"


def test_autosave_disabled_keeps_file_untouched(catalog_file: Path) -> None:
    before = catalog_file.read_text()
    store = JsonCatalogStore(catalog_file, autosave=False)

    store.create_exercise(_fields("Bird Dog", "bird-dog"))

    assert store.get_exercise(8) is not None
    assert catalog_file.read_text() == before


def test_invalid_catalog_file_raises(write_temp_json, tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(CatalogError, match="Invalid JSON"):
        JsonCatalogStore(broken).list_exercises()

    bad_record = write_temp_json("bad.json", [{"name": "No id"}])
    with pytest.raises(CatalogError, match="Invalid exercise record"):
        JsonCatalogStore(bad_record).list_exercises()
