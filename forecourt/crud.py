# forecourt/crud.py
"""SQL-backed listing store.

Query helpers take an open `Session`; `SqlListingStore` owns the session
lifecycle and commits once per call.
"""
import json
from datetime import datetime
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from typing import List, Optional
from .db import Base, make_session_factory
from .models import Car
from .schemas import Listing, OPTIONAL_FIELDS
from .store import DuplicateNameError, ListingStore
from .utils import retry


def _by_name(name: str):
    return func.lower(Car.name) == name.strip().lower()


def _photos(value) -> List[str]:
    # older rows kept photos as a JSON string in a text column
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else []
        except ValueError:
            value = []
    if not isinstance(value, list):
        return []
    return [p for p in value if p]


def to_listing(row: Car) -> Listing:
    return Listing(
        id=str(row.id),
        name=row.name,
        year=row.year,
        price=row.price,
        garage_id=row.garage_id,
        photos=_photos(row.photos),
        sold=bool(row.sold),
        sold_date=row.sold_date,
        created_at=row.created_at,
        updated_at=row.updated_at or row.created_at,
        **{f: getattr(row, f) for f in OPTIONAL_FIELDS},
    )


def list_cars(db: Session) -> List[Car]:
    stmt = select(Car).order_by(Car.updated_at.desc(), Car.id.desc())
    return list(db.scalars(stmt))


def get_car_by_name(db: Session, name: str) -> Optional[Car]:
    stmt = select(Car).where(_by_name(name)).order_by(Car.id).limit(1)
    return db.scalars(stmt).first()


def insert_car(db: Session, listing: Listing) -> Car:
    data = {c.name: getattr(listing, c.name) for c in Car.__table__.columns if c.name != "id"}
    obj = Car(**data)
    db.add(obj)
    db.flush()
    return obj


def delete_cars_by_name(db: Session, name: str) -> int:
    result = db.execute(
        delete(Car).where(_by_name(name)).execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def mark_cars_sold(db: Session, name: str, sold_on: str, now: datetime) -> Optional[str]:
    rows = list(db.scalars(select(Car).where(_by_name(name)).order_by(Car.id).with_for_update()))
    if not rows:
        return None
    existing = next((r.sold_date for r in rows if r.sold_date), None)
    sold_date = existing or sold_on
    for row in rows:
        row.sold = True
        row.sold_date = row.sold_date or sold_date
        row.updated_at = now
    return sold_date


class SqlListingStore(ListingStore):
    def __init__(self, engine):
        self.engine = engine
        self.session_factory = make_session_factory(engine)

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)

    @retry(OperationalError, tries=3, delay=0.5)
    def list_all(self) -> List[Listing]:
        with self.session_factory() as db:
            return [to_listing(r) for r in list_cars(db)]

    @retry(OperationalError, tries=3, delay=0.5)
    def find_by_name(self, name: str) -> Optional[Listing]:
        with self.session_factory() as db:
            row = get_car_by_name(db, name)
            return to_listing(row) if row else None

    def insert(self, listing: Listing) -> Listing:
        with self.session_factory() as db:
            if get_car_by_name(db, listing.name) is not None:
                raise DuplicateNameError(listing.name)
            try:
                row = insert_car(db, listing)
                db.commit()
            except IntegrityError as e:
                # lost a race with a concurrent insert of the same name
                db.rollback()
                raise DuplicateNameError(listing.name) from e
            return to_listing(row)

    def delete_by_name(self, name: str) -> int:
        with self.session_factory() as db:
            removed = delete_cars_by_name(db, name)
            db.commit()
            return removed

    def mark_sold(self, name: str, sold_on: str, now: datetime) -> Optional[str]:
        with self.session_factory() as db:
            sold_date = mark_cars_sold(db, name, sold_on, now)
            db.commit()
            return sold_date
