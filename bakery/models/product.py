"""
Product table

All product kinds share the `products` table. `product_type` is the
discriminator; the payload columns of a kind are only populated when the
discriminator matches (see `details`).
"""
from decimal import Decimal

from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric, String, Text, Uuid

from bakery.core.database import Base
from bakery.domain.product import (
    DETAILS_MODELS,
    PAYLOAD_FIELDS,
    BreadType,
    CakeType,
    PastryType,
    PizzaSize,
    PizzaType,
    ProductDetails,
    ProductType,
    TypeOfLeavening,
)
from bakery.models.base import EntityMixin, SoftDeletable, utcnow

ALL_PAYLOAD_FIELDS = tuple(field for fields in PAYLOAD_FIELDS.values() for field in fields)


def _enum_column(enum_cls, **kwargs):
    # Store the enum values ("Pizza"), not the member names ("PIZZA")
    return Column(
        Enum(enum_cls, native_enum=False, length=40, values_callable=lambda e: [m.value for m in e]),
        **kwargs,
    )


class Product(EntityMixin, SoftDeletable, Base):
    """
    Products of every kind, one row each
    """
    __tablename__ = "products"

    # Common fields
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True, index=True)
    image_url = Column(String(500), nullable=False, default="")
    product_type = _enum_column(ProductType, nullable=False, index=True, default=ProductType.PLAIN)

    market_id = Column(Uuid, ForeignKey("markets.id"), index=True)

    # Pizza
    pizza_type = _enum_column(PizzaType)
    ingredients = Column(Text)
    size = _enum_column(PizzaSize)
    is_spicy = Column(Boolean)

    # Bread
    bread_type = _enum_column(BreadType)
    is_gluten_free = Column(Boolean)
    shelf_life_days = Column(Integer)
    leavening = _enum_column(TypeOfLeavening)

    # Cake
    cake_type = _enum_column(CakeType)
    flavor = Column(String(100))
    occasion = Column(String(100))
    serving_size = Column(Integer)
    is_customizable = Column(Boolean)

    # Pastry
    pastry_type = _enum_column(PastryType)
    filling = Column(String(200))
    is_vegan = Column(Boolean)

    def __init__(self, **kwargs):
        kwargs.setdefault("is_available", True)
        kwargs.setdefault("image_url", "")
        if "details" not in kwargs and "product_type" not in kwargs:
            kwargs["product_type"] = ProductType.PLAIN
        super().__init__(**kwargs)

    @property
    def details(self) -> ProductDetails:
        """Payload of the current kind, rebuilt from its columns"""
        product_type = self.product_type or ProductType.PLAIN
        values = {}
        for field in PAYLOAD_FIELDS[product_type]:
            value = getattr(self, field)
            if value is not None:
                values[field] = value
        return DETAILS_MODELS[product_type].model_validate(values)

    @details.setter
    def details(self, details: ProductDetails) -> None:
        """Switch to the payload's kind and clear every column owned by other kinds"""
        values = details.model_dump(exclude={"kind"})
        for field in ALL_PAYLOAD_FIELDS:
            setattr(self, field, values.get(field))
        self.product_type = details.kind

    # ------------------------------------------------------------------
    # Business rules
    # ------------------------------------------------------------------

    def can_be_ordered(self) -> bool:
        return bool(self.is_available) and not self.is_deleted and self.price > 0

    def discounted_price(self, discount_percentage: Decimal) -> Decimal:
        discount_percentage = Decimal(discount_percentage)
        if discount_percentage < 0 or discount_percentage > 100:
            raise ValueError("Discount percentage must be between 0 and 100")
        return Decimal(self.price) * (1 - discount_percentage / 100)

    def apply_changes(self, **fields) -> None:
        """Overwrite common fields and stamp updated_at"""
        for name, value in fields.items():
            setattr(self, name, value)
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.product_type} {self.name!r}>"
