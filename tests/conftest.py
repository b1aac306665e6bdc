"""
Pytest fixtures and configuration for the bakery backend tests

Repository, unit-of-work and handler tests run against an in-memory SQLite
database (sqlite+aiosqlite with a StaticPool), created fresh for each test.
"""
from datetime import date, time
from decimal import Decimal

import pytest

from bakery.core.database import build_engine, build_session_factory, init_models
from bakery.domain.product import (
    BreadDetails,
    BreadType,
    CakeDetails,
    CakeType,
    PastryDetails,
    PastryType,
    PizzaDetails,
    PizzaSize,
    PizzaType,
    PlainDetails,
)
from bakery.models import Customer, Market, Product
from bakery.repositories.unit_of_work import UnitOfWork

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """
    Fresh in-memory database with every table created

    Scope: function (new database per test)
    """
    test_engine = build_engine(TEST_DATABASE_URL)
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def uow(session_factory):
    """UnitOfWork under test, closed after the test"""
    async with UnitOfWork(session_factory) as unit_of_work:
        yield unit_of_work


@pytest.fixture
def seed(session_factory):
    """
    Persist entities through a separate session

    Usage: await seed(product_a, product_b)
    """
    async def _seed(*entities):
        async with session_factory() as session:
            session.add_all(entities)
            await session.commit()
        return entities

    return _seed


def make_product(name="Plain Roll", price="2.50", details=None, **kwargs) -> Product:
    return Product(name=name, price=Decimal(price), details=details or PlainDetails(), **kwargs)


def make_pizza(name="Margherita", price="8.00", **kwargs) -> Product:
    details = PizzaDetails(
        pizza_type=PizzaType.MARGHERITA,
        ingredients="tomato, mozzarella, basil",
        size=PizzaSize.MEDIUM,
    )
    return make_product(name=name, price=price, details=details, **kwargs)


def make_bread(name="Country Sourdough", price="4.00", **kwargs) -> Product:
    details = BreadDetails(bread_type=BreadType.SOURDOUGH, shelf_life_days=4)
    return make_product(name=name, price=price, details=details, **kwargs)


def make_cake(name="Sacher", price="30.00", cake_type=CakeType.CHOCOLATE_CAKE, **kwargs) -> Product:
    details = CakeDetails(cake_type=cake_type, flavor="chocolate", serving_size=8)
    return make_product(name=name, price=price, details=details, **kwargs)


def make_pastry(name="Croissant", price="1.80", **kwargs) -> Product:
    details = PastryDetails(pastry_type=PastryType.VIENNOISERIE)
    return make_product(name=name, price=price, details=details, **kwargs)


@pytest.fixture
def products():
    """
    Builders for every product kind

    Usage: products.pizza(price="9.00")
    """
    class Builders:
        plain = staticmethod(make_product)
        pizza = staticmethod(make_pizza)
        bread = staticmethod(make_bread)
        cake = staticmethod(make_cake)
        pastry = staticmethod(make_pastry)

    return Builders


@pytest.fixture
def sample_market():
    return Market(
        name="Central Market",
        address="1 Main Street",
        city="Springfield",
        opening_time=time(7, 0),
        closing_time=time(19, 0),
    )


@pytest.fixture
def sample_customer():
    return Customer(
        first_name="Ada",
        last_name="Baker",
        email="ada@example.com",
        date_of_birth=date(1990, 5, 17),
        total_spent=Decimal("600"),
        is_vip=True,
    )
