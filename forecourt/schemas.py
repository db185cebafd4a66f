# forecourt/schemas.py
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

PLACEHOLDER_PHOTO = "/images/placeholder.jpg"

# free-form fields copied through from the dashboard form when non-blank
OPTIONAL_FIELDS = (
    "mileage",
    "engine",
    "fuel",
    "transmission",
    "colour",
    "owners",
    "service_history",
    "mot_until",
    "description",
    "extras",
)


class Listing(BaseModel):
    """A car for sale. Serialized with camelCase keys (garageId, soldDate, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    name: str
    year: int
    price: float
    garage_id: str
    photos: List[str] = Field(default_factory=list)

    mileage: Optional[str] = None
    engine: Optional[str] = None
    fuel: Optional[str] = None
    transmission: Optional[str] = None
    colour: Optional[str] = None
    owners: Optional[str] = None
    service_history: Optional[str] = None
    mot_until: Optional[str] = None
    description: Optional[str] = None
    extras: Optional[str] = None

    sold: bool = False
    sold_date: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def photo(self) -> str:
        return self.photos[0] if self.photos else PLACEHOLDER_PHOTO

    def to_document(self) -> dict:
        """JSON-ready dict as stored in the cars file."""
        return self.model_dump(mode="json", by_alias=True, exclude={"photo"})


class ActionResult(BaseModel):
    success: bool = True


class SoldResult(ActionResult):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sold_date: str
