# forecourt/visibility.py
"""Listing lifecycle and public visibility.

Storage only keeps `sold` and `soldDate`; the lifecycle state is derived on
read from those two fields, the current time and the hide window:

    ACTIVE --mark sold--> SOLD --hide window elapses--> SOLD_EXPIRED

Expired listings drop out of the public catalogue but stay visible to admins.
"""
import enum
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional
from .dates import parse_uk_date
from .schemas import Listing

HIDE_WINDOW = timedelta(days=7)


class ListingStatus(str, enum.Enum):
    ACTIVE = "active"
    SOLD = "sold"
    SOLD_EXPIRED = "sold_expired"


@dataclass(frozen=True)
class ListingState:
    status: ListingStatus
    sold_on: Optional[date] = None

    @property
    def publicly_visible(self) -> bool:
        return self.status is not ListingStatus.SOLD_EXPIRED


def _local_naive(now: datetime) -> datetime:
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def listing_state(listing: Listing, now: datetime, hide_window: timedelta = HIDE_WINDOW) -> ListingState:
    sold_on = parse_uk_date(listing.sold_date)
    if sold_on is not None:
        # boundary itself stays visible
        if _local_naive(now) - datetime.combine(sold_on, time.min) > hide_window:
            return ListingState(ListingStatus.SOLD_EXPIRED, sold_on)
        return ListingState(ListingStatus.SOLD, sold_on)
    if listing.sold or listing.sold_date:
        return ListingState(ListingStatus.SOLD)
    return ListingState(ListingStatus.ACTIVE)


def is_publicly_visible(listing: Listing, now: datetime, hide_window: timedelta = HIDE_WINDOW) -> bool:
    return listing_state(listing, now, hide_window).publicly_visible
