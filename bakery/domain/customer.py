"""
Customer Domain Models

full_name and vip_discount_percentage are read from the entity properties.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from bakery.domain.money import Money


class CustomerDto(BaseModel):
    """Customer as returned by the API, with the derived VIP discount"""
    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone_number: Optional[str] = None
    date_of_birth: date
    total_spent: Money
    is_vip: bool
    vip_discount_percentage: Money
    market_id: Optional[UUID] = None
    last_order_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerSummaryDto(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    total_spent: Money
    is_vip: bool

    model_config = ConfigDict(from_attributes=True)


class CustomerCreate(BaseModel):
    """Schema for creating a new customer"""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: Optional[str] = None
    date_of_birth: date
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    market_id: Optional[UUID] = None
    total_spent: Decimal = Field(Decimal("0"), ge=0)
    is_vip: bool = False
