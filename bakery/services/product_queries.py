"""
Product Query Handlers

Read-only handlers; soft-deleted products are never returned.
"""
import logging
from typing import List, Optional
from uuid import UUID

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.domain.filters import ProductFilter, ProductSort, ProductSortBy, SortDirection
from bakery.domain.pagination import PagedList, PageRequest
from bakery.domain.product import ProductDto, ProductSummaryDto, ProductType
from bakery.models.product import Product
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.instrumentation import logged_handler

logger = logging.getLogger(__name__)

_CATEGORY_ORDER = {product_type: ordinal for ordinal, product_type in enumerate(ProductType)}

_SORT_KEYS = {
    ProductSortBy.NAME: lambda p: p.name.lower(),
    ProductSortBy.PRICE: lambda p: p.price,
    ProductSortBy.CATEGORY: lambda p: _CATEGORY_ORDER[p.product_type],
    ProductSortBy.CREATED_AT: lambda p: p.created_at,
}


class GetProductByIdHandler:

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, product_id: UUID) -> Result[ProductDto]:
        found = await self.uow.products.get_by_id(product_id)
        if found.is_failure:
            return found.propagate()
        if found.value.is_deleted:
            return Result.failure(Error.not_found(f"Product with ID {product_id} not found"))
        return Result.success(ProductDto.from_entity(found.value))


class GetAllProductsHandler:
    """
    Product summaries, optionally narrowed by category and availability

    The category filter matches kind names by substring, ignoring case
    ("cak" matches Cake).
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(
        self,
        category: Optional[str] = None,
        is_available: Optional[bool] = None,
        sort: Optional[ProductSort] = None,
    ) -> Result[List[ProductSummaryDto]]:
        sort = sort or ProductSort()
        criteria = []
        if category and category.strip():
            needle = category.strip().lower()
            kinds = [kind for kind in ProductType if needle in kind.value.lower()]
            if not kinds:
                return Result.success([])
            criteria.append(Product.product_type.in_(kinds))
        if is_available is not None:
            criteria.append(Product.is_available.is_(is_available))

        found = await self.uow.products.find(*criteria)
        if found.is_failure:
            return found.propagate()

        # Stable sorts: id first so ties come out in a fixed order
        products = sorted(found.value, key=lambda p: str(p.id))
        products.sort(
            key=_SORT_KEYS[sort.sort_by],
            reverse=sort.direction == SortDirection.DESCENDING,
        )
        return Result.success([ProductSummaryDto.from_entity(p) for p in products])


class GetProductsHandler:
    """Filtered, sorted page of products"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(
        self,
        product_filter: Optional[ProductFilter] = None,
        sort: Optional[ProductSort] = None,
        page: Optional[PageRequest] = None,
    ) -> Result[PagedList[ProductDto]]:
        page = page or PageRequest()
        found = await self.uow.products.get_page(product_filter or ProductFilter(), sort or ProductSort(), page)
        if found.is_failure:
            return found.propagate()

        products = found.value
        logger.debug(f"Retrieved {len(products.items)} products out of {products.total_count}")
        return Result.success(
            PagedList[ProductDto](
                items=[ProductDto.from_entity(p) for p in products.items],
                total_count=products.total_count,
                page_number=products.page_number,
                page_size=products.page_size,
            )
        )


class GetProductsByMarketHandler:
    """Available products of one market"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, market_id: UUID) -> Result[List[ProductDto]]:
        market = await self.uow.markets.get_by_id(market_id)
        if market.is_failure:
            return market.propagate()
        if market.value.is_deleted:
            return Result.failure(Error.not_found(f"Market with ID {market_id} not found"))

        found = await self.uow.products.get_available_by_market(market_id)
        if found.is_failure:
            return found.propagate()
        return Result.success([ProductDto.from_entity(p) for p in found.value])
