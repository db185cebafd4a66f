# forecourt/store.py
"""Listing persistence contract.

The service only talks to `ListingStore`; the JSON file and SQL backends are
interchangeable and picked at startup by `make_store`. Stores assume their
input has already been validated and always hit the backing medium (no
caching), so every call sees the current state.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from .schemas import Listing


class DuplicateNameError(Exception):
    def __init__(self, name):
        self.name = name
        super().__init__(f"listing {name!r} already exists")


class ListingStore(ABC):

    @abstractmethod
    def list_all(self) -> List[Listing]:
        """All listings, most recently updated first."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Listing]:
        """Case-insensitive exact match on name."""

    @abstractmethod
    def insert(self, listing: Listing) -> Listing:
        """Persist a new listing; raises DuplicateNameError if the name is taken."""

    @abstractmethod
    def delete_by_name(self, name: str) -> int:
        """Remove every listing matching name; returns how many went."""

    @abstractmethod
    def mark_sold(self, name: str, sold_on: str, now: datetime) -> Optional[str]:
        """Flag matching listings sold.

        An existing sold date is kept and returned; otherwise `sold_on` is
        recorded. Returns None when no listing matches.
        """


def names_match(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


def newest_first(listings: List[Listing]) -> List[Listing]:
    return sorted(
        listings,
        key=lambda l: l.updated_at.timestamp() if l.updated_at else float("-inf"),
        reverse=True,
    )


def make_store(settings) -> ListingStore:
    if settings.store_backend == "sql":
        from .crud import SqlListingStore
        from .db import make_engine

        if not settings.postgres_url:
            raise RuntimeError("POSTGRES_URL not set")
        engine = make_engine(
            settings.postgres_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        store = SqlListingStore(engine)
        store.create_tables()
        return store

    from .filestore import JsonFileListingStore
    return JsonFileListingStore(settings.cars_file, backup_path=settings.cars_backup_file)
