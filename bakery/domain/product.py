"""
Product Domain Models

A product is one record with common fields plus a tagged payload that
depends on its kind (plain, pizza, bread, cake, pastry). The payload models
below are the variants; `ProductDetails` is their discriminated union.

ProductDto flattens the variant for the wire: every payload field is optional
and `category` carries the kind name.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from bakery.domain.money import Money


class ProductType(str, Enum):
    """Discriminator of the products table"""
    PLAIN = "Plain"
    PIZZA = "Pizza"
    BREAD = "Bread"
    CAKE = "Cake"
    PASTRY = "Pastry"


class PizzaType(str, Enum):
    NEAPOLITAN = "Neapolitan"
    ROMAN = "Roman"
    SICILIAN = "Sicilian"
    NEW_YORK_STYLE = "NewYorkStyle"
    CHICAGO_DEEP_DISH = "ChicagoDeepDish"
    DETROIT_STYLE = "DetroitStyle"
    CALZONE = "Calzone"
    STUFFED_CRUST = "StuffedCrust"
    FLATBREAD = "Flatbread"
    FOCACCIA_STYLE = "FocacciaStyle"
    GOURMET = "Gourmet"
    GLUTEN_FREE = "GlutenFree"
    VEGAN = "Vegan"
    WHITE_PIZZA = "WhitePizza"
    MARGHERITA = "Margherita"
    PEPPERONI = "Pepperoni"
    FOUR_CHEESE = "FourCheese"


class PizzaSize(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class BreadType(str, Enum):
    BAGUETTE = "Baguette"
    CIABATTA = "Ciabatta"
    SOURDOUGH = "Sourdough"
    WHOLE_WHEAT = "WholeWheat"
    RYE = "Rye"
    MULTIGRAIN = "Multigrain"
    FOCACCIA = "Focaccia"
    BRIOCHE = "Brioche"
    PITA = "Pita"
    NAAN = "Naan"
    FLATBREAD = "Flatbread"
    CORNBREAD = "Cornbread"
    BAGEL = "Bagel"
    LAVASH = "Lavash"
    PANE_TOSCANO = "PaneToscano"
    MILK_BREAD = "MilkBread"
    HAMBURGER_BUN = "HamburgerBun"
    HOT_DOG_BUN = "HotDogBun"


class TypeOfLeavening(str, Enum):
    YEAST = "YeastFermentation"
    SOURDOUGH = "SourdoughFermentation"
    CHEMICAL = "ChemicalLeavening"
    STEAM = "SteamLeavening"
    MECHANICAL = "MechanicalLeavening"


class CakeType(str, Enum):
    SPONGE_CAKE = "SpongeCake"
    GENOISE = "Genoise"
    CHIFFON_CAKE = "ChiffonCake"
    ANGEL_FOOD_CAKE = "AngelFoodCake"
    POUND_CAKE = "PoundCake"
    BUTTER_CAKE = "ButterCake"
    CHEESECAKE = "Cheesecake"
    MOUSSE_CAKE = "MousseCake"
    FRUIT_CAKE = "FruitCake"
    TORTE = "Torte"
    FLOURLESS_CAKE = "FlourlessCake"
    ICE_CREAM_CAKE = "IceCreamCake"
    MERINGUE_CAKE = "MeringueCake"
    CREAM_CAKE = "CreamCake"
    CHOCOLATE_CAKE = "ChocolateCake"


class PastryType(str, Enum):
    SHORTCRUST = "Shortcrust"
    PUFF_PASTRY = "PuffPastry"
    CHOUX_PASTRY = "ChouxPastry"
    FILO_PASTRY = "FiloPastry"
    SPONGE_CAKE = "SpongeCake"
    MERINGUE = "Meringue"
    CREAM_FILLED = "CreamFilled"
    NUT_BASED = "NutBased"
    CHOCOLATE_BASED = "ChocolateBased"
    FRUIT_BASED = "FruitBased"
    DRY_BISCUITS = "DryBiscuits"
    MARZIPAN = "Marzipan"
    VIENNOISERIE = "Viennoiserie"
    SAVORY_PASTRY = "SavoryPastry"


# ============================================================================
# Payload variants
# ============================================================================

class PlainDetails(BaseModel):
    """Plain products carry no extra fields"""
    kind: Literal[ProductType.PLAIN] = ProductType.PLAIN


class PizzaDetails(BaseModel):
    kind: Literal[ProductType.PIZZA] = ProductType.PIZZA
    pizza_type: PizzaType = PizzaType.MARGHERITA
    ingredients: str = ""
    size: PizzaSize = PizzaSize.MEDIUM
    is_spicy: bool = False

    @property
    def preparation_minutes(self) -> int:
        """Oven time depends on the size"""
        return {PizzaSize.SMALL: 15, PizzaSize.MEDIUM: 20, PizzaSize.LARGE: 25}[self.size]


class BreadDetails(BaseModel):
    kind: Literal[ProductType.BREAD] = ProductType.BREAD
    bread_type: BreadType
    is_gluten_free: bool = False
    shelf_life_days: int = Field(3, ge=1)
    leavening: Optional[TypeOfLeavening] = None

    def is_fresh(self, produced_at: datetime, now: Optional[datetime] = None) -> bool:
        """Bread is fresh while the days since production are within its shelf life"""
        now = now or datetime.now(produced_at.tzinfo)
        return (now - produced_at).days <= self.shelf_life_days


class CakeDetails(BaseModel):
    kind: Literal[ProductType.CAKE] = ProductType.CAKE
    cake_type: CakeType
    flavor: str = ""
    occasion: str = ""
    serving_size: int = Field(1, ge=1)
    is_customizable: bool = False

    def price_per_person(self, price: Decimal) -> Decimal:
        if self.serving_size <= 0:
            return Decimal("0")
        return price / self.serving_size


class PastryDetails(BaseModel):
    kind: Literal[ProductType.PASTRY] = ProductType.PASTRY
    pastry_type: PastryType
    filling: Optional[str] = None
    is_vegan: bool = False

    @property
    def is_filled(self) -> bool:
        return bool(self.filling)


ProductDetails = Annotated[
    Union[PlainDetails, PizzaDetails, BreadDetails, CakeDetails, PastryDetails],
    Field(discriminator="kind"),
]

# Payload fields owned by each kind (the product_type column excluded)
PAYLOAD_FIELDS = {
    ProductType.PLAIN: (),
    ProductType.PIZZA: ("pizza_type", "ingredients", "size", "is_spicy"),
    ProductType.BREAD: ("bread_type", "is_gluten_free", "shelf_life_days", "leavening"),
    ProductType.CAKE: ("cake_type", "flavor", "occasion", "serving_size", "is_customizable"),
    ProductType.PASTRY: ("pastry_type", "filling", "is_vegan"),
}

DETAILS_MODELS = {
    ProductType.PLAIN: PlainDetails,
    ProductType.PIZZA: PizzaDetails,
    ProductType.BREAD: BreadDetails,
    ProductType.CAKE: CakeDetails,
    ProductType.PASTRY: PastryDetails,
}


def parse_product_type(category: Optional[str]) -> Optional[ProductType]:
    """
    Resolve a category name (case-insensitive) to a ProductType

    "Pastrie" is accepted as an alias of Pastry.
    """
    if not category:
        return None
    key = category.strip().lower()
    if key == "pastrie":
        key = "pastry"
    for product_type in ProductType:
        if product_type.value.lower() == key:
            return product_type
    return None


# ============================================================================
# DTOs
# ============================================================================

class ProductDto(BaseModel):
    """
    Wire shape of a product

    Payload fields of other kinds stay None.
    """
    id: UUID
    name: str
    description: str = ""
    price: Money
    is_available: bool
    image_url: str = ""
    category: str = Field(..., description="Discriminator name (Plain, Pizza, Bread, Cake, Pastry)")
    market_id: Optional[UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Pizza
    pizza_type: Optional[PizzaType] = None
    ingredients: Optional[str] = None
    size: Optional[PizzaSize] = None
    is_spicy: Optional[bool] = None
    # Bread
    bread_type: Optional[BreadType] = None
    is_gluten_free: Optional[bool] = None
    shelf_life_days: Optional[int] = None
    leavening: Optional[TypeOfLeavening] = None
    # Cake
    cake_type: Optional[CakeType] = None
    flavor: Optional[str] = None
    occasion: Optional[str] = None
    serving_size: Optional[int] = None
    is_customizable: Optional[bool] = None
    # Pastry
    pastry_type: Optional[PastryType] = None
    filling: Optional[str] = None
    is_vegan: Optional[bool] = None

    @classmethod
    def from_entity(cls, product) -> "ProductDto":
        payload = product.details.model_dump(exclude={"kind"})
        return cls(
            id=product.id,
            name=product.name,
            description=product.description or "",
            price=product.price,
            is_available=product.is_available,
            image_url=product.image_url or "",
            category=product.product_type.value,
            market_id=product.market_id,
            created_at=product.created_at,
            updated_at=product.updated_at,
            **payload,
        )


class ProductSummaryDto(BaseModel):
    id: UUID
    name: str
    price: Money
    is_available: bool
    category: str

    @classmethod
    def from_entity(cls, product) -> "ProductSummaryDto":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            is_available=product.is_available,
            category=product.product_type.value,
        )


class ProductCreate(BaseModel):
    """Request body for creating a product; payload fields apply to the category given"""
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    is_available: bool = True
    image_url: str = ""
    category: str = ""
    market_id: Optional[UUID] = None

    pizza_type: Optional[PizzaType] = None
    ingredients: Optional[str] = None
    size: Optional[PizzaSize] = None
    is_spicy: Optional[bool] = None
    bread_type: Optional[BreadType] = None
    is_gluten_free: Optional[bool] = None
    shelf_life_days: Optional[int] = None
    leavening: Optional[TypeOfLeavening] = None
    cake_type: Optional[CakeType] = None
    flavor: Optional[str] = None
    occasion: Optional[str] = None
    serving_size: Optional[int] = None
    is_customizable: Optional[bool] = None
    pastry_type: Optional[PastryType] = None
    filling: Optional[str] = None
    is_vegan: Optional[bool] = None


class ProductUpdate(BaseModel):
    """Request body for updating a product; the category cannot change"""
    name: str = ""
    description: str = ""
    price: Decimal = Decimal("0")
    is_available: bool = True
    image_url: Optional[str] = None

    pizza_type: Optional[PizzaType] = None
    ingredients: Optional[str] = None
    size: Optional[PizzaSize] = None
    is_spicy: Optional[bool] = None
    bread_type: Optional[BreadType] = None
    is_gluten_free: Optional[bool] = None
    shelf_life_days: Optional[int] = None
    leavening: Optional[TypeOfLeavening] = None
    cake_type: Optional[CakeType] = None
    flavor: Optional[str] = None
    occasion: Optional[str] = None
    serving_size: Optional[int] = None
    is_customizable: Optional[bool] = None
    pastry_type: Optional[PastryType] = None
    filling: Optional[str] = None
    is_vegan: Optional[bool] = None
