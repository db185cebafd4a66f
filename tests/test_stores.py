# tests/test_stores.py
"""Behaviour every listing store must share, run against both backends."""
from datetime import datetime, timedelta, timezone
import pytest
from forecourt.crud import SqlListingStore
from forecourt.db import make_engine
from forecourt.filestore import JsonFileListingStore
from forecourt.schemas import Listing
from forecourt.store import DuplicateNameError

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(params=["file", "sql"])
def store(request, tmp_path):
    if request.param == "file":
        yield JsonFileListingStore(tmp_path / "cars.json")
        return
    engine = make_engine("sqlite://")
    sql_store = SqlListingStore(engine)
    sql_store.create_tables()
    yield sql_store
    engine.dispose()


def make_car(name="Focus 2019", minutes=0, **kw):
    stamp = T0 + timedelta(minutes=minutes)
    data = {"name": name, "year": 2019, "price": 8500.0, "garage_id": "g1",
            "photos": ["a.jpg"], "created_at": stamp, "updated_at": stamp}
    data.update(kw)
    return Listing(**data)


def test_empty_store(store):
    assert store.list_all() == []
    assert store.find_by_name("nothing") is None


def test_insert_and_find(store):
    stored = store.insert(make_car(colour="Blue"))
    assert stored.id
    found = store.find_by_name("focus 2019")
    assert found is not None
    assert found.name == "Focus 2019"
    assert found.colour == "Blue"
    assert found.photos == ["a.jpg"]
    assert found.sold is False
    assert found.sold_date is None


def test_insert_rejects_duplicate_name(store):
    store.insert(make_car())
    with pytest.raises(DuplicateNameError):
        store.insert(make_car(name="FOCUS 2019"))
    assert len(store.list_all()) == 1


def test_list_newest_first(store):
    store.insert(make_car("Old", minutes=0))
    store.insert(make_car("New", minutes=10))
    store.insert(make_car("Middle", minutes=5))
    assert [c.name for c in store.list_all()] == ["New", "Middle", "Old"]


def test_delete_by_name(store):
    store.insert(make_car())
    store.insert(make_car("Golf 2017"))
    assert store.delete_by_name("nope") == 0
    assert store.delete_by_name("FOCUS 2019") == 1
    assert [c.name for c in store.list_all()] == ["Golf 2017"]


def test_mark_sold_keeps_first_date(store):
    store.insert(make_car())
    later = T0 + timedelta(days=1)
    assert store.mark_sold("Focus 2019", "02/01/2026", later) == "02/01/2026"
    assert store.mark_sold("focus 2019", "09/01/2026", later + timedelta(days=7)) == "02/01/2026"
    car = store.find_by_name("Focus 2019")
    assert car.sold is True
    assert car.sold_date == "02/01/2026"
    assert car.updated_at.replace(tzinfo=None) > T0.replace(tzinfo=None)


def test_mark_sold_missing(store):
    assert store.mark_sold("Ghost", "02/01/2026", T0) is None
