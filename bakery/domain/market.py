"""
Market Domain Models

A market is a point of sale with daily opening hours.
"""
from datetime import datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MarketDto(BaseModel):
    id: UUID
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone_number: str = ""
    email: str = ""
    opening_time: time
    closing_time: time
    is_open: bool
    is_currently_open: bool = Field(..., description="Open flag set and current time within opening hours")
    daily_opening_hours: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, market, now: Optional[datetime] = None) -> "MarketDto":
        return cls(
            id=market.id,
            name=market.name,
            address=market.address,
            city=market.city,
            state=market.state,
            zip_code=market.zip_code,
            phone_number=market.phone_number,
            email=market.email,
            opening_time=market.opening_time,
            closing_time=market.closing_time,
            is_open=market.is_open,
            is_currently_open=market.is_currently_open(now),
            daily_opening_hours=market.daily_opening_hours,
            created_at=market.created_at,
        )


class MarketCreate(BaseModel):
    """Schema for creating a new market"""
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone_number: str = ""
    email: str = ""
    opening_time: time = time(7, 0)
    closing_time: time = time(19, 0)
    is_open: bool = True
