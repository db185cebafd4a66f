# forecourt/models.py
"""SQLAlchemy ORM model for the `cars` table."""
from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, Integer, Text, Float, TIMESTAMP, JSON, func, Index
from sqlalchemy.dialects.postgresql import JSONB
from .db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Car(Base):
    __tablename__ = "cars"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    garage_id = Column(Text, nullable=False)
    photos = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    mileage = Column(Text)
    engine = Column(Text)
    fuel = Column(Text)
    transmission = Column(Text)
    colour = Column(Text)
    owners = Column(Text)
    service_history = Column(Text)
    mot_until = Column(Text)
    description = Column(Text)
    extras = Column(Text)
    sold = Column(Boolean, nullable=False, default=False)
    sold_date = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), default=_utcnow, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), default=_utcnow, server_default=func.now())

Index("idx_cars_name_lower", func.lower(Car.name), unique=True)
Index("idx_cars_updated_at", Car.updated_at)
