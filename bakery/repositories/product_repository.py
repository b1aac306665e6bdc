"""
Product Repository

Product-specific queries on top of the generic Repository.
"""
import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.domain.filters import ProductFilter, ProductSort
from bakery.domain.pagination import PagedList, PageRequest
from bakery.domain.product import ProductType
from bakery.models.product import Product
from bakery.repositories.base import Repository
from bakery.repositories.product_query import (
    apply_page,
    build_count_query,
    build_product_query,
    validate_filter,
    validate_page,
)

logger = logging.getLogger(__name__)


class ProductRepository(Repository[Product, UUID]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Product)

    async def get_available_by_market(self, market_id: UUID) -> Result[List[Product]]:
        """Available products of a market, by name"""
        try:
            stmt = (
                self._query(Product.market_id == market_id, Product.is_available.is_(True))
                .order_by(func.lower(Product.name), Product.id)
            )
            products = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(products)} available products for market {market_id}")
            return Result.success(products)
        except Exception as e:
            logger.error(f"Error getting products for market {market_id}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_by_type(self, product_type: ProductType) -> Result[List[Product]]:
        try:
            stmt = self._query(Product.product_type == product_type).order_by(func.lower(Product.name), Product.id)
            products = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(products)} products of type {product_type.value}")
            return Result.success(products)
        except Exception as e:
            logger.error(f"Error getting products of type {product_type}: {e}", exc_info=True)
            return Result.from_exception(e)

    async def search(self, term: str) -> Result[List[Product]]:
        """Case-insensitive substring match on name and description"""
        if not term or not term.strip():
            return Result.failure(Error.invalid_input("Search term cannot be empty"))
        try:
            needle = term.strip().lower()
            stmt = self._query(
                or_(
                    func.lower(Product.name).contains(needle, autoescape=True),
                    func.lower(Product.description).contains(needle, autoescape=True),
                )
            ).order_by(func.lower(Product.name), Product.id)
            products = list(await self.session.scalars(stmt))
            logger.debug(f"Search '{term}' matched {len(products)} products")
            return Result.success(products)
        except Exception as e:
            logger.error(f"Error searching products for '{term}': {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_by_price_range(self, min_price: Decimal, max_price: Decimal) -> Result[List[Product]]:
        if min_price < 0 or max_price < 0:
            return Result.failure(Error.invalid_input("Prices cannot be negative"))
        if min_price > max_price:
            return Result.failure(Error.invalid_input("Minimum price cannot be greater than maximum price"))
        try:
            stmt = self._query(Product.price >= min_price, Product.price <= max_price).order_by(
                Product.price, Product.id
            )
            products = list(await self.session.scalars(stmt))
            logger.debug(f"Found {len(products)} products priced {min_price}-{max_price}")
            return Result.success(products)
        except Exception as e:
            logger.error(f"Error getting products by price range: {e}", exc_info=True)
            return Result.from_exception(e)

    async def can_be_ordered(self, product_id: UUID) -> Result[bool]:
        """False for unknown ids instead of NotFound"""
        try:
            product = await self._find(product_id)
            if product is None:
                logger.warning(f"Product {product_id} not found, cannot be ordered")
                return Result.success(False)
            return Result.success(product.can_be_ordered())
        except Exception as e:
            logger.error(f"Error checking whether product {product_id} can be ordered: {e}", exc_info=True)
            return Result.from_exception(e)

    async def get_page(
        self,
        product_filter: ProductFilter,
        sort: ProductSort,
        page: PageRequest,
    ) -> Result[PagedList]:
        """
        One page of products matching the filter

        The total count is taken on the filtered set before paging.
        """
        error = validate_filter(product_filter) or validate_page(page)
        if error:
            logger.warning(f"Rejected product page request: {error}")
            return Result.failure(error)
        try:
            total = await self.session.scalar(build_count_query(product_filter))
            stmt = apply_page(build_product_query(product_filter, sort), page)
            products = list(await self.session.scalars(stmt))
            logger.debug(
                f"Retrieved page {page.page_number} with {len(products)} products out of {total}"
            )
            return Result.success(
                PagedList(
                    items=products,
                    total_count=int(total or 0),
                    page_number=page.page_number,
                    page_size=page.page_size,
                )
            )
        except Exception as e:
            logger.error(f"Error getting product page: {e}", exc_info=True)
            return Result.from_exception(e)
