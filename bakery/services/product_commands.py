"""
Product Command Handlers

Create, update and soft-delete products. Each handler works inside one
UnitOfWork and returns a Result; validation failures are InvalidInput.

Create validation order:
1. name required
2. price > 0
3. category required and known
4. kind-specific fields (pizza ingredients, bread type and shelf life,
   cake type, flavor and serving size, pastry type)
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import ValidationError

from bakery.core.errors import Error
from bakery.core.result import Result
from bakery.domain.product import (
    DETAILS_MODELS,
    PAYLOAD_FIELDS,
    ProductCreate,
    ProductDetails,
    ProductDto,
    ProductType,
    ProductUpdate,
    parse_product_type,
)
from bakery.models.product import Product
from bakery.repositories.unit_of_work import UnitOfWork
from bakery.services.instrumentation import logged_handler

logger = logging.getLogger(__name__)


def _validate_common(name: str, price: Optional[Decimal]) -> Optional[Error]:
    if not name or not name.strip():
        return Error.invalid_input("Product name is required")
    if price is None or price <= 0:
        return Error.invalid_input("Price must be greater than zero")
    return None


def _validate_payload(kind: ProductType, source: Any) -> Optional[Error]:
    """Kind-specific checks on the fields present in a create/update request"""
    if kind == ProductType.PIZZA:
        if not source.ingredients or not source.ingredients.strip():
            return Error.invalid_input("Ingredients are required for pizza")
    elif kind == ProductType.BREAD:
        if source.bread_type is None:
            return Error.invalid_input("Bread type is required for bread")
        if source.shelf_life_days is not None and source.shelf_life_days <= 0:
            return Error.invalid_input("Shelf life days must be greater than zero")
    elif kind == ProductType.CAKE:
        if source.cake_type is None:
            return Error.invalid_input("Cake type is required for cake")
        if not source.flavor or not source.flavor.strip():
            return Error.invalid_input("Flavor is required for cake")
        if source.serving_size is not None and source.serving_size <= 0:
            return Error.invalid_input("Serving size must be greater than zero")
    elif kind == ProductType.PASTRY:
        if source.pastry_type is None:
            return Error.invalid_input("Pastry type is required for pastry")
    return None


def build_details(kind: ProductType, source: Any, current: Optional[Dict[str, Any]] = None) -> Result[ProductDetails]:
    """
    Payload of `kind` from the request fields that are set

    Args:
        kind: product kind the payload belongs to
        source: ProductCreate or ProductUpdate
        current: existing payload values, overridden by the request

    Unset fields keep their current value or the payload default
    (bread shelf life 3 days, cake serving size 1).
    """
    values = dict(current or {})
    for field in PAYLOAD_FIELDS[kind]:
        value = getattr(source, field, None)
        if value is not None:
            values[field] = value
    try:
        return Result.success(DETAILS_MODELS[kind].model_validate(values))
    except ValidationError as e:
        return Result.failure(Error.invalid_input(f"Invalid {kind.value} fields: {e.error_count()} error(s)"))


class CreateProductHandler:
    """Validate a ProductCreate request and store the new product"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def validate(self, command: ProductCreate) -> Optional[Error]:
        error = _validate_common(command.name, command.price)
        if error:
            return error
        if not command.category or not command.category.strip():
            return Error.invalid_input("Category is required")
        kind = parse_product_type(command.category)
        if kind is None:
            return Error.invalid_input(f"Unknown category: {command.category}")
        return _validate_payload(kind, command)

    @logged_handler
    async def handle(self, command: ProductCreate) -> Result[ProductDto]:
        error = self.validate(command)
        if error:
            return Result.failure(error)

        kind = parse_product_type(command.category)
        details = build_details(kind, command)
        if details.is_failure:
            return details.propagate()

        product = Product(
            name=command.name.strip(),
            description=command.description,
            price=command.price,
            is_available=command.is_available,
            image_url=command.image_url,
            market_id=command.market_id,
            details=details.value,
        )

        async with self.uow.transaction():
            added = await self.uow.products.add(product)
            if added.is_failure:
                await self.uow.rollback_transaction()
                return added.propagate()
            saved = await self.uow.save_changes()
            if saved.is_failure:
                await self.uow.rollback_transaction()
                return saved.propagate()

        logger.info(f"Created {kind.value} product {product.id} ({product.name})")
        return Result.success(ProductDto.from_entity(product))


class UpdateProductHandler:
    """
    Overwrite the common fields and the current kind's payload of a product

    The kind itself never changes on update.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, product_id: UUID, command: ProductUpdate) -> Result[ProductDto]:
        error = _validate_common(command.name, command.price)
        if error:
            return Result.failure(error)

        found = await self.uow.products.get_by_id(product_id)
        if found.is_failure:
            return found.propagate()
        product = found.value
        if product.is_deleted:
            return Result.failure(Error.not_found(f"Product with ID {product_id} not found"))

        error = _validate_payload(product.product_type, _MergedPayload(product, command))
        if error:
            return Result.failure(error)
        current = product.details.model_dump(exclude={"kind"})
        details = build_details(product.product_type, command, current)
        if details.is_failure:
            return details.propagate()

        changes = {
            "name": command.name.strip(),
            "description": command.description,
            "price": command.price,
            "is_available": command.is_available,
        }
        if command.image_url is not None:
            changes["image_url"] = command.image_url
        product.apply_changes(**changes)
        product.details = details.value

        async with self.uow.transaction():
            updated = await self.uow.products.update(product)
            if updated.is_failure:
                await self.uow.rollback_transaction()
                return updated.propagate()
            saved = await self.uow.save_changes()
            if saved.is_failure:
                await self.uow.rollback_transaction()
                return saved.propagate()

        logger.info(f"Updated product {product_id}")
        return Result.success(ProductDto.from_entity(updated.value))


class _MergedPayload:
    """Request fields falling back to the stored ones, for update validation"""

    def __init__(self, product: Product, command: ProductUpdate):
        self._product = product
        self._command = command

    def __getattr__(self, field: str) -> Any:
        value = getattr(self._command, field, None)
        if value is None:
            value = getattr(self._product, field, None)
        return value


class DeleteProductHandler:
    """Soft delete: the row stays, flagged is_deleted"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @logged_handler
    async def handle(self, product_id: UUID) -> Result[None]:
        found = await self.uow.products.get_by_id(product_id)
        if found.is_failure:
            return found.propagate()
        if found.value.is_deleted:
            return Result.failure(Error.not_found(f"Product with ID {product_id} not found"))

        async with self.uow.transaction():
            deleted = await self.uow.products.soft_delete(product_id)
            if deleted.is_failure:
                await self.uow.rollback_transaction()
                return deleted
            saved = await self.uow.save_changes()
            if saved.is_failure:
                await self.uow.rollback_transaction()
                return saved.propagate()

        logger.info(f"Soft deleted product {product_id}")
        return Result.ok()
