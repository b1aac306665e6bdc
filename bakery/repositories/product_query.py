"""
Product query composition

Builds the SELECT for a ProductFilter + ProductSort + PageRequest in a fixed
order:

    not deleted -> discriminator -> subtype filter -> market -> price range
    -> availability -> search -> sort (ties on id) -> offset/limit

Only the subtype filter owned by the discriminator is applied. A subtype
filter sent without a discriminator selects its own kind; filters for other
kinds are dropped, never combined.
"""
import logging
from typing import Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.sql import Select

from bakery.core.config import settings
from bakery.core.errors import Error
from bakery.domain.filters import ProductFilter, ProductSort, ProductSortBy, SortDirection
from bakery.domain.pagination import PageRequest
from bakery.domain.product import ProductType
from bakery.models.market import Market
from bakery.models.product import Product

logger = logging.getLogger(__name__)

# Subtype filter field -> (kind it belongs to, column)
SUBTYPE_FILTERS = {
    "pizza_type": (ProductType.PIZZA, Product.pizza_type),
    "bread_type": (ProductType.BREAD, Product.bread_type),
    "cake_type": (ProductType.CAKE, Product.cake_type),
    "pastry_type": (ProductType.PASTRY, Product.pastry_type),
}

# Category sorting follows the declaration order of ProductType
CATEGORY_ORDINAL = case(
    {product_type.value: ordinal for ordinal, product_type in enumerate(ProductType)},
    value=Product.product_type,
    else_=len(ProductType),
)


def validate_filter(product_filter: ProductFilter) -> Optional[Error]:
    if product_filter.min_price is not None and product_filter.min_price < 0:
        return Error.invalid_input("Minimum price cannot be negative")
    if product_filter.has_inverted_price_range:
        return Error.invalid_input("Minimum price cannot be greater than maximum price")
    return None


def validate_page(page: PageRequest, max_page_size: Optional[int] = None) -> Optional[Error]:
    max_page_size = max_page_size or settings.MAX_PAGE_SIZE
    if page.page_number < 1:
        return Error.invalid_paging("Page number must be at least 1")
    if page.page_size < 1 or page.page_size > max_page_size:
        return Error.invalid_paging(f"Page size must be between 1 and {max_page_size}")
    return None


def resolve_kind(product_filter: ProductFilter) -> Optional[ProductType]:
    """Discriminator to filter on, implied by a lone subtype filter if not given"""
    if product_filter.product_type is not None:
        return product_filter.product_type
    for field, (kind, _column) in SUBTYPE_FILTERS.items():
        if getattr(product_filter, field) is not None:
            return kind
    return None


def apply_filter(stmt: Select, product_filter: ProductFilter) -> Select:
    stmt = stmt.where(Product.is_deleted.is_(False))

    kind = resolve_kind(product_filter)
    if kind is not None:
        stmt = stmt.where(Product.product_type == kind)
        for field, (owner, column) in SUBTYPE_FILTERS.items():
            value = getattr(product_filter, field)
            if value is None:
                continue
            if owner == kind:
                stmt = stmt.where(column == value)
            else:
                logger.debug(f"Ignoring {field} filter: it does not apply to {kind.value} products")

    if product_filter.market_id is not None:
        stmt = stmt.where(Product.market_id == product_filter.market_id)
    if product_filter.market_name:
        stmt = stmt.join(Market, Product.market_id == Market.id).where(
            func.lower(Market.name) == product_filter.market_name.strip().lower()
        )

    if product_filter.min_price is not None:
        stmt = stmt.where(Product.price >= product_filter.min_price)
    if product_filter.max_price is not None:
        stmt = stmt.where(Product.price <= product_filter.max_price)

    if product_filter.is_available is not None:
        stmt = stmt.where(Product.is_available.is_(product_filter.is_available))

    if product_filter.search_term and product_filter.search_term.strip():
        term = product_filter.search_term.strip().lower()
        stmt = stmt.where(
            or_(
                func.lower(Product.name).contains(term, autoescape=True),
                func.lower(Product.description).contains(term, autoescape=True),
            )
        )
    return stmt


def apply_sort(stmt: Select, sort: ProductSort) -> Select:
    column = {
        ProductSortBy.NAME: func.lower(Product.name),
        ProductSortBy.PRICE: Product.price,
        ProductSortBy.CATEGORY: CATEGORY_ORDINAL,
        ProductSortBy.CREATED_AT: Product.created_at,
    }[sort.sort_by]
    if sort.direction == SortDirection.DESCENDING:
        return stmt.order_by(column.desc(), Product.id)
    return stmt.order_by(column.asc(), Product.id)


def build_product_query(product_filter: ProductFilter, sort: ProductSort) -> Select:
    """Filtered and sorted statement, without paging"""
    return apply_sort(apply_filter(select(Product), product_filter), sort)


def build_count_query(product_filter: ProductFilter) -> Select:
    filtered = apply_filter(select(Product.id), product_filter).subquery()
    return select(func.count()).select_from(filtered)


def apply_page(stmt: Select, page: PageRequest) -> Select:
    return stmt.offset(page.offset).limit(page.page_size)
