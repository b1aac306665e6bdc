"""
Products API Endpoints

List, read, create, update and soft-delete bakery products.
"""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from bakery.api.dependencies import get_unit_of_work
from bakery.api.responses import success, unwrap
from bakery.core.config import settings
from bakery.domain.filters import ProductFilter, ProductSort, ProductSortBy, SortDirection
from bakery.domain.pagination import PageRequest
from bakery.domain.product import (
    BreadType,
    CakeType,
    PastryType,
    PizzaType,
    ProductCreate,
    ProductType,
    ProductUpdate,
)
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.product_commands import CreateProductHandler, DeleteProductHandler, UpdateProductHandler
from bakery.services.product_queries import GetAllProductsHandler, GetProductByIdHandler, GetProductsHandler

router = APIRouter()


@router.get("")
async def get_products(
    product_type: Optional[ProductType] = Query(None, description="Product kind (Plain, Pizza, Bread, Cake, Pastry)"),
    pizza_type: Optional[PizzaType] = Query(None),
    bread_type: Optional[BreadType] = Query(None),
    cake_type: Optional[CakeType] = Query(None),
    pastry_type: Optional[PastryType] = Query(None),
    market_id: Optional[UUID] = Query(None),
    market_name: Optional[str] = Query(None, description="Market name, exact match ignoring case"),
    min_price: Optional[Decimal] = Query(None),
    max_price: Optional[Decimal] = Query(None),
    is_available: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search by name or description"),
    sort_by: ProductSortBy = Query(ProductSortBy.NAME),
    sort_direction: SortDirection = Query(SortDirection.ASCENDING),
    page_number: int = Query(1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Filtered, sorted page of products

    Subtype filters (pizza_type, bread_type, ...) only apply to their own kind.
    """
    product_filter = ProductFilter(
        product_type=product_type,
        pizza_type=pizza_type,
        bread_type=bread_type,
        cake_type=cake_type,
        pastry_type=pastry_type,
        market_id=market_id,
        market_name=market_name,
        min_price=min_price,
        max_price=max_price,
        is_available=is_available,
        search_term=search,
    )
    result = await GetProductsHandler(uow).handle(
        product_filter,
        ProductSort(sort_by=sort_by, direction=sort_direction),
        PageRequest(page_number=page_number, page_size=page_size),
    )
    return success(unwrap(result))


@router.get("/summary")
async def get_product_summaries(
    category: Optional[str] = Query(None, description="Category name or part of it"),
    is_available: Optional[bool] = Query(None),
    sort_by: ProductSortBy = Query(ProductSortBy.NAME),
    sort_direction: SortDirection = Query(SortDirection.ASCENDING),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetAllProductsHandler(uow).handle(
        category=category,
        is_available=is_available,
        sort=ProductSort(sort_by=sort_by, direction=sort_direction),
    )
    return success(unwrap(result))


@router.get("/{product_id}")
async def get_product(product_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetProductByIdHandler(uow).handle(product_id)
    return success(unwrap(result))


@router.post("", status_code=201)
async def create_product(product: ProductCreate, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Create a product of the kind named by `category`"""
    result = await CreateProductHandler(uow).handle(product)
    return success(unwrap(result))


@router.put("/{product_id}")
async def update_product(product_id: UUID, product: ProductUpdate, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await UpdateProductHandler(uow).handle(product_id, product)
    return success(unwrap(result))


@router.delete("/{product_id}")
async def delete_product(product_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Soft delete: the product disappears from listings but the row is kept"""
    unwrap(await DeleteProductHandler(uow).handle(product_id))
    return {"status": "success", "message": f"Product {product_id} deleted"}
