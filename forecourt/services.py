# forecourt/services.py
"""Listing operations behind the HTTP API.

`ListingService` validates input, checks the admin key, applies the public
visibility rule to reads and turns backend failures into `StoreError`.
"""
import hmac
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
from .dates import today_uk
from .errors import DuplicateListing, Forbidden, InvalidInput, ListingError, NotFound, StoreError
from .schemas import Listing, OPTIONAL_FIELDS
from .store import DuplicateNameError, ListingStore
from .visibility import HIDE_WINDOW, ListingState, listing_state
from .utils import logger

# payload keys are camelCase, as sent by the dashboard
_PAYLOAD_KEYS = {
    "service_history": "serviceHistory",
    "mot_until": "motUntil",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return _as_int(_as_number(value))
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _photos(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [p.strip() for p in value if isinstance(p, str) and p.strip()]


class ListingService:
    def __init__(
        self,
        store: ListingStore,
        admin_key: str,
        hide_window: timedelta = HIDE_WINDOW,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self._admin_key = (admin_key or "").strip()
        self.hide_window = hide_window
        self.clock = clock

    # -- helpers --------------------------------------------------------

    def is_admin(self, credential: Optional[str]) -> bool:
        if not self._admin_key:
            return False
        return hmac.compare_digest(_text(credential).encode(), self._admin_key.encode())

    def _require_admin(self, credential: Optional[str]):
        if not self.is_admin(credential):
            raise Forbidden()

    def _call(self, action: str, fn, *args):
        try:
            return fn(*args)
        except ListingError:
            raise
        except DuplicateNameError as e:
            raise DuplicateListing(e.name) from e
        except Exception as e:
            logger.exception("Store %s failed: %s", action, e)
            raise StoreError(action) from e

    def state_of(self, listing: Listing, now: Optional[datetime] = None) -> ListingState:
        return listing_state(listing, now or self.clock(), self.hide_window)

    # -- reads ----------------------------------------------------------

    def list_public(self, now: Optional[datetime] = None) -> List[Listing]:
        now = now or self.clock()
        cars = self._call("list", self.store.list_all)
        return [c for c in cars if self.state_of(c, now).publicly_visible]

    def list_admin(self, credential: Optional[str]) -> List[Listing]:
        self._require_admin(credential)
        return self._call("list", self.store.list_all)

    def get_by_name(self, name: Optional[str], now: Optional[datetime] = None) -> Listing:
        name = _text(name)
        if not name:
            raise InvalidInput("name")
        car = self._call("find", self.store.find_by_name, name)
        if car is None or not self.state_of(car, now).publicly_visible:
            raise NotFound()
        return car

    # -- writes ---------------------------------------------------------

    def validate(self, payload: Dict[str, Any]) -> Listing:
        """Build a new listing from a dashboard payload or raise InvalidInput."""
        if not isinstance(payload, dict):
            raise InvalidInput("body")

        name = _text(payload.get("name"))
        if not name:
            raise InvalidInput("name")
        garage_id = _text(payload.get("garageId"))
        if not garage_id:
            raise InvalidInput("garageId")
        year = _as_int(payload.get("year"))
        if year is None:
            raise InvalidInput("year")
        price = _as_number(payload.get("price"))
        if price is None or price <= 0:
            raise InvalidInput("price")
        photos = _photos(payload.get("photos"))
        if not photos:
            raise InvalidInput("photos")

        extras = {}
        for field in OPTIONAL_FIELDS:
            value = _text(payload.get(_PAYLOAD_KEYS.get(field, field)))
            if value:
                extras[field] = value

        stamp = datetime.now(timezone.utc)
        return Listing(
            name=name,
            year=year,
            price=price,
            garage_id=garage_id,
            photos=photos,
            sold=False,
            sold_date=None,
            created_at=stamp,
            updated_at=stamp,
            **extras,
        )

    def create(self, credential: Optional[str], payload: Dict[str, Any]) -> Listing:
        self._require_admin(credential)
        listing = self.validate(payload)
        stored = self._call("insert", self.store.insert, listing)
        logger.info("Created car %s (garage %s)", stored.name, stored.garage_id)
        return stored

    def delete(self, credential: Optional[str], name: Optional[str]) -> int:
        self._require_admin(credential)
        name = _text(name)
        if not name:
            raise InvalidInput("name")
        removed = self._call("delete", self.store.delete_by_name, name)
        if not removed:
            raise NotFound()
        logger.info("Deleted %d car(s) named %s", removed, name)
        return removed

    def mark_sold(self, credential: Optional[str], name: Optional[str]) -> str:
        self._require_admin(credential)
        name = _text(name)
        if not name:
            raise InvalidInput("name")
        today = today_uk(self.clock())
        sold_date = self._call(
            "mark_sold", self.store.mark_sold, name, today, datetime.now(timezone.utc)
        )
        if sold_date is None:
            raise NotFound()
        logger.info("Marked %s sold on %s", name, sold_date)
        return sold_date
