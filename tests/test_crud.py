# tests/test_crud.py
from datetime import datetime, timezone
import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.exc import IntegrityError
from forecourt import crud
from forecourt.config import Settings
from forecourt.crud import SqlListingStore
from forecourt.db import make_engine, normalize_url
from forecourt.filestore import JsonFileListingStore
from forecourt.models import Car
from forecourt.schemas import Listing
from forecourt.store import DuplicateNameError, make_store

STAMP = datetime(2026, 1, 1, tzinfo=timezone.utc)

@pytest.fixture(scope="module")
def store():
    engine = make_engine("sqlite://")
    sql_store = SqlListingStore(engine)
    sql_store.create_tables()
    yield sql_store
    engine.dispose()

def test_normalize_url():
    assert normalize_url("postgres://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"
    assert normalize_url("sqlite://") == "sqlite://"

def test_reads_legacy_text_photos(store):
    with store.session_factory() as db:
        db.execute(insert(Car).values(
            name="Legacy", year=2015, price=3000, garage_id="g2",
            photos='["x.jpg", "", "y.jpg"]',
        ))
        db.commit()
    car = store.find_by_name("legacy")
    assert car.photos == ["x.jpg", "y.jpg"]
    assert car.photo == "x.jpg"

def test_photos_helper_handles_garbage():
    assert crud._photos("not json") == []
    assert crud._photos(None) == []
    assert crud._photos(["a.jpg", None]) == ["a.jpg"]

def test_make_store_selects_backend(tmp_path):
    sql = make_store(Settings(admin_key="k", store_backend="sql", postgres_url="sqlite://"))
    assert isinstance(sql, SqlListingStore)
    assert sql.list_all() == []
    assert isinstance(make_store(Settings(admin_key="k", cars_file=str(tmp_path / "c.json"))), JsonFileListingStore)
    with pytest.raises(RuntimeError):
        make_store(Settings(admin_key="k", store_backend="sql"))

@pytest.fixture
def file_store(tmp_path):
    # separate connections per session, unlike the shared in-memory engine
    engine = create_engine(f"sqlite:///{tmp_path / 'cars.db'}")
    sql_store = SqlListingStore(engine)
    sql_store.create_tables()
    yield sql_store
    engine.dispose()

def _car(name):
    return Listing(name=name, year=2019, price=8500, garage_id="g1", photos=["a.jpg"],
                   created_at=STAMP, updated_at=STAMP)

def test_interleaved_inserts_leave_one_row(file_store):
    first, second = file_store.session_factory(), file_store.session_factory()
    try:
        assert crud.get_car_by_name(first, "Focus") is None
        assert crud.get_car_by_name(second, "focus") is None
        crud.insert_car(first, _car("Focus"))
        first.commit()
        with pytest.raises(IntegrityError):
            crud.insert_car(second, _car("FOCUS"))
            second.commit()
        second.rollback()
    finally:
        first.close()
        second.close()
    assert [c.name for c in file_store.list_all()] == ["Focus"]

def test_insert_losing_race_raises_duplicate(file_store, monkeypatch):
    file_store.insert(_car("Focus"))
    # the pre-check misses, as it would for a concurrent writer
    monkeypatch.setattr(crud, "get_car_by_name", lambda db, name: None)
    with pytest.raises(DuplicateNameError):
        file_store.insert(_car("focus"))
    assert len(file_store.list_all()) == 1
