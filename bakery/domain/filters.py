"""
Product filter and sort options
"""
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from bakery.domain.product import BreadType, CakeType, PastryType, PizzaType, ProductType


class ProductSortBy(str, Enum):
    NAME = "Name"
    PRICE = "Price"
    CATEGORY = "Category"
    CREATED_AT = "CreatedAt"


class SortDirection(str, Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


class ProductFilter(BaseModel):
    """
    Optional product criteria; unset fields do not filter

    At most one subtype filter is honoured: the one belonging to the
    product_type (see bakery.repositories.product_query).
    """
    product_type: Optional[ProductType] = None
    pizza_type: Optional[PizzaType] = None
    bread_type: Optional[BreadType] = None
    cake_type: Optional[CakeType] = None
    pastry_type: Optional[PastryType] = None
    market_id: Optional[UUID] = None
    market_name: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    is_available: Optional[bool] = None
    search_term: Optional[str] = None

    @property
    def has_inverted_price_range(self) -> bool:
        return (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        )


class ProductSort(BaseModel):
    sort_by: ProductSortBy = ProductSortBy.NAME
    direction: SortDirection = SortDirection.ASCENDING
