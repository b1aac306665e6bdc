"""
Unit tests for entity business rules and the product payload invariant

No database needed: entities are plain objects until added to a session.
"""
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from bakery.domain.customer import CustomerDto
from bakery.domain.market import MarketDto
from bakery.domain.product import (
    BreadDetails,
    BreadType,
    CakeDetails,
    CakeType,
    PizzaDetails,
    PizzaSize,
    ProductDto,
    ProductType,
    parse_product_type,
)
from bakery.models import Customer, Market, Product


def _customer(**kwargs) -> Customer:
    fields = dict(
        first_name="Ada",
        last_name="Baker",
        email="ada@example.com",
        date_of_birth=date(1990, 5, 17),
    )
    fields.update(kwargs)
    return Customer(**fields)


class TestCustomerRules:

    @pytest.mark.parametrize(
        "spent, expected",
        [("1500", "15"), ("1000", "15"), ("750", "10"), ("500", "10"), ("300", "5"), ("100", "0")],
    )
    def test_vip_discount_tiers(self, spent, expected):
        customer = _customer(is_vip=True, total_spent=Decimal(spent))

        assert customer.vip_discount_percentage == Decimal(expected)

    def test_non_vip_gets_no_discount(self):
        customer = _customer(is_vip=False, total_spent=Decimal("5000"))

        assert customer.vip_discount_percentage == Decimal("0")

    def test_regular_customer_needs_recent_order_and_spend(self):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        recent = now - timedelta(days=10)

        assert _customer(last_order_date=recent, total_spent=Decimal("150")).is_regular_customer(now)
        assert not _customer(last_order_date=recent, total_spent=Decimal("100")).is_regular_customer(now)
        assert not _customer(
            last_order_date=now - timedelta(days=45), total_spent=Decimal("150")
        ).is_regular_customer(now)
        assert not _customer(total_spent=Decimal("150")).is_regular_customer(now)

    def test_naive_order_date_is_treated_as_utc(self):
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        customer = _customer(last_order_date=datetime(2026, 2, 25), total_spent=Decimal("200"))

        assert customer.is_regular_customer(now)

    def test_full_name_and_validity(self):
        customer = _customer()

        assert customer.full_name == "Ada Baker"
        assert customer.is_valid()
        assert not _customer(first_name="  ").is_valid()
        assert not _customer(date_of_birth=date.today() + timedelta(days=1)).is_valid()

    def test_defaults(self):
        customer = _customer()

        assert customer.total_spent == Decimal("0")
        assert customer.is_vip is False
        assert customer.is_deleted is False
        assert customer.id is not None


class TestMarketRules:

    def _market(self, **kwargs) -> Market:
        return Market(name="Central", opening_time=time(8, 0), closing_time=time(18, 30), **kwargs)

    def test_open_within_hours(self):
        market = self._market()

        assert market.is_currently_open(datetime(2026, 1, 5, 12, 0))
        assert market.is_currently_open(datetime(2026, 1, 5, 8, 0))
        assert not market.is_currently_open(datetime(2026, 1, 5, 7, 59))
        assert not market.is_currently_open(datetime(2026, 1, 5, 19, 0))

    def test_closed_flag_wins(self):
        market = self._market(is_open=False)

        assert not market.is_currently_open(datetime(2026, 1, 5, 12, 0))

    def test_daily_opening_hours(self):
        assert self._market().daily_opening_hours == pytest.approx(10.5)

    def test_dto_carries_open_state(self):
        market = self._market()

        dto = MarketDto.from_entity(market, datetime(2026, 1, 5, 20, 0))

        assert dto.is_currently_open is False
        assert dto.daily_opening_hours == pytest.approx(10.5)


class TestProductPayload:
    """The payload columns always belong to the current kind"""

    def test_new_product_is_plain(self):
        product = Product(name="Roll", price=Decimal("1"))

        assert product.product_type == ProductType.PLAIN
        assert product.is_available is True
        assert product.details.kind == ProductType.PLAIN

    def test_details_set_kind_and_columns(self):
        product = Product(
            name="Diavola",
            price=Decimal("9"),
            details=PizzaDetails(ingredients="salami", size=PizzaSize.LARGE, is_spicy=True),
        )

        assert product.product_type == ProductType.PIZZA
        assert product.ingredients == "salami"
        assert product.details.preparation_minutes == 25

    def test_switching_kind_clears_other_columns(self):
        product = Product(name="Thing", price=Decimal("5"), details=PizzaDetails(ingredients="cheese"))

        product.details = CakeDetails(cake_type=CakeType.CHEESECAKE, flavor="lemon")

        assert product.product_type == ProductType.CAKE
        assert product.ingredients is None
        assert product.pizza_type is None
        assert product.flavor == "lemon"
        assert product.serving_size == 1

    def test_bread_defaults_and_freshness(self):
        details = BreadDetails(bread_type=BreadType.BAGUETTE)
        produced = datetime(2026, 1, 1, 6, 0)

        assert details.shelf_life_days == 3
        assert details.is_fresh(produced, produced + timedelta(days=3))
        assert not details.is_fresh(produced, produced + timedelta(days=4))

    def test_cake_price_per_person(self):
        details = CakeDetails(cake_type=CakeType.TORTE, flavor="hazelnut", serving_size=8)

        assert details.price_per_person(Decimal("32")) == Decimal("4")

    def test_can_be_ordered(self):
        product = Product(name="Roll", price=Decimal("1"))
        assert product.can_be_ordered()

        product.is_available = False
        assert not product.can_be_ordered()

        product.is_available = True
        product.mark_deleted()
        assert not product.can_be_ordered()
        assert product.updated_at is not None

    def test_discounted_price(self):
        product = Product(name="Cake", price=Decimal("20"))

        assert product.discounted_price(Decimal("25")) == Decimal("15")
        with pytest.raises(ValueError):
            product.discounted_price(Decimal("120"))

    def test_dto_flattens_payload(self):
        product = Product(
            name="Rye loaf",
            price=Decimal("3.20"),
            details=BreadDetails(bread_type=BreadType.RYE, shelf_life_days=5),
        )

        dto = ProductDto.from_entity(product)

        assert dto.category == "Bread"
        assert dto.bread_type == BreadType.RYE
        assert dto.shelf_life_days == 5
        assert dto.pizza_type is None
        assert dto.cake_type is None


class TestParseProductType:

    @pytest.mark.parametrize(
        "category, expected",
        [
            ("Pizza", ProductType.PIZZA),
            ("bread", ProductType.BREAD),
            ("CAKE", ProductType.CAKE),
            ("Pastrie", ProductType.PASTRY),
            ("pastry", ProductType.PASTRY),
            ("plain", ProductType.PLAIN),
            ("Cookie", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, category, expected):
        assert parse_product_type(category) == expected


class TestMoneyOnTheWire:

    def test_product_price_is_a_json_number(self):
        product = Product(name="Marinara", price=Decimal("1.80"), details=PizzaDetails(ingredients="tomato"))
        product.created_at = datetime(2026, 1, 5, tzinfo=timezone.utc)

        dto = ProductDto.from_entity(product)

        assert dto.price == Decimal("1.80")
        assert dto.model_dump()["price"] == Decimal("1.80")
        assert dto.model_dump(mode="json")["price"] == 1.8

    def test_customer_amounts_are_json_numbers(self):
        customer = Customer(
            first_name="Ada",
            last_name="Baker",
            email="ada@example.com",
            date_of_birth=date(1990, 5, 17),
            total_spent=Decimal("600"),
            is_vip=True,
        )

        dumped = CustomerDto.model_validate(customer).model_dump(mode="json")

        assert dumped["total_spent"] == 600.0
        assert dumped["vip_discount_percentage"] == 10.0
