import json

import pytest

from business_finder.errors import FavoritesSaveFailure
from business_finder.favorites.storage import JsonFileStorage
from business_finder.favorites.store import CORRUPT_FAVORITES_WARNING, FavoritesStore

from conftest import make_business

SLOT = "favoriteBusinesses"


def _store(tmp_path):
    return FavoritesStore(JsonFileStorage(tmp_path), SLOT)


def test_load_absent_slot_is_empty(tmp_path):
    store = _store(tmp_path)
    assert store.all() == []
    assert store.warning is None


def test_toggle_adds_and_persists(tmp_path):
    store = _store(tmp_path)
    business = make_business("abc", latitude=40.0, longitude=-74.0)

    assert store.toggle(business) is True
    assert store.contains("abc")

    saved = json.loads((tmp_path / f"{SLOT}.json").read_text())
    assert saved == [business.model_dump()]

    reloaded = _store(tmp_path)
    assert reloaded.all() == [business]


def test_toggle_twice_restores_original_set(tmp_path):
    store = _store(tmp_path)
    existing = make_business("keep")
    store.toggle(existing)
    before = store.all()

    business = make_business("abc")
    store.toggle(business)
    assert store.toggle(business) is False

    assert store.all() == before
    assert not store.contains("abc")
    assert _store(tmp_path).all() == before


def test_favorites_keep_insertion_order(tmp_path):
    store = _store(tmp_path)
    for pid in ["c", "a", "b"]:
        store.toggle(make_business(pid))

    assert [b.place_id for b in _store(tmp_path).all()] == ["c", "a", "b"]
    assert len(store) == 3


def test_corrupt_slot_gives_empty_set_with_warning(tmp_path):
    (tmp_path / f"{SLOT}.json").write_text("{not json")

    store = _store(tmp_path)

    assert store.all() == []
    assert store.warning == CORRUPT_FAVORITES_WARNING


def test_slot_holding_wrong_shape_is_corrupt(tmp_path):
    (tmp_path / f"{SLOT}.json").write_text(json.dumps({"place_id": "abc"}))

    store = _store(tmp_path)

    assert store.all() == []
    assert store.warning == CORRUPT_FAVORITES_WARNING


def test_invalid_record_is_corrupt(tmp_path):
    (tmp_path / f"{SLOT}.json").write_text(json.dumps([{"title": "No id"}]))

    assert _store(tmp_path).warning == CORRUPT_FAVORITES_WARNING


def test_corrupt_slot_is_overwritten_on_next_toggle(tmp_path):
    (tmp_path / f"{SLOT}.json").write_text("garbage")
    store = _store(tmp_path)

    store.toggle(make_business("abc"))

    reloaded = _store(tmp_path)
    assert [b.place_id for b in reloaded.all()] == ["abc"]
    assert reloaded.warning is None


def test_duplicate_persisted_ids_keep_first(tmp_path):
    records = [
        make_business("abc", title="First").model_dump(),
        make_business("abc", title="Second").model_dump(),
    ]
    (tmp_path / f"{SLOT}.json").write_text(json.dumps(records))

    store = _store(tmp_path)

    assert [b.title for b in store.all()] == ["First"]


def test_storage_round_trip_and_remove(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested")
    assert storage.get_item("slot") is None

    storage.set_item("slot", "[]")
    assert storage.get_item("slot") == "[]"

    storage.remove_item("slot")
    assert storage.get_item("slot") is None


def test_failed_write_leaves_favorites_unchanged(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = FavoritesStore(JsonFileStorage(blocker / "favorites"), SLOT)

    with pytest.raises(FavoritesSaveFailure, match="Failed to save favorites"):
        store.toggle(make_business("abc"))

    assert not store.contains("abc")
    assert store.all() == []


def test_successful_toggle_clears_corruption_warning(tmp_path):
    (tmp_path / f"{SLOT}.json").write_text("garbage")
    store = _store(tmp_path)
    assert store.warning == CORRUPT_FAVORITES_WARNING

    store.toggle(make_business("abc"))

    assert store.warning is None
