"""Report request/response schemas"""
from typing import List, Optional, Union
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator


class RawReport(BaseModel):
    """One untrusted price report as submitted by a client"""
    itemId: str
    storeId: str
    itemName: Optional[str] = None
    # Strict: booleans and numeric strings are not prices
    price: Union[StrictInt, StrictFloat]


class ReportBatchRequest(BaseModel):
    """Body of POST /reports. Batch size and version are checked by the normalizer."""
    reports: List[RawReport]
    version: int = 1


class ObservationOut(BaseModel):
    """Public projection of a stored observation (no id, no reporter)"""
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    sku_id: str = Field(..., serialization_alias="skuid")
    store_id: str = Field(..., serialization_alias="storeid")
    price: float
    created_at: datetime = Field(..., serialization_alias="created")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without an offset; they are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
