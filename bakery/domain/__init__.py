"""
Domain Layer - Schemas and DTOs

Pydantic models describing products, customers, markets, filters and pages.
ORM entities live in bakery.models.
"""
from bakery.domain.customer import CustomerCreate, CustomerDto, CustomerSummaryDto
from bakery.domain.filters import ProductFilter, ProductSort, ProductSortBy, SortDirection
from bakery.domain.market import MarketCreate, MarketDto
from bakery.domain.pagination import PagedList, PageRequest
from bakery.domain.product import (
    ProductCreate,
    ProductDetails,
    ProductDto,
    ProductSummaryDto,
    ProductType,
    ProductUpdate,
)

__all__ = [
    'CustomerCreate',
    'CustomerDto',
    'CustomerSummaryDto',
    'MarketCreate',
    'MarketDto',
    'PagedList',
    'PageRequest',
    'ProductCreate',
    'ProductDetails',
    'ProductDto',
    'ProductFilter',
    'ProductSort',
    'ProductSortBy',
    'ProductSummaryDto',
    'ProductType',
    'ProductUpdate',
    'SortDirection',
]
