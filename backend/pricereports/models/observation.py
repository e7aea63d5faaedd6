"""Price Observation model (append-only event log)"""
from sqlalchemy import Column, String, Float, DateTime, Index
import uuid

from pricereports.core.database import Base


class PriceObservation(Base):
    __tablename__ = "price_observations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Reported data
    name = Column(String(96))
    sku_id = Column(String(32), nullable=False)
    store_id = Column(String(8), nullable=False)
    price = Column(Float(precision=53), nullable=False)

    # One-way fingerprint of the reporter's address, never exposed to readers
    reporter = Column(String(64), nullable=False)

    # Assigned by the service at insert time
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_observation_store_sku_created", "store_id", "sku_id", "created_at"),
        Index("ix_observation_reporter", "reporter"),
    )
