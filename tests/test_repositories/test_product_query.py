"""
Tests for product filter composition, sorting and paging (ProductRepository.get_page)
"""
from decimal import Decimal

import pytest

from bakery.core.errors import ErrorKind
from bakery.domain.filters import ProductFilter, ProductSort, ProductSortBy, SortDirection
from bakery.domain.pagination import PageRequest
from bakery.domain.product import CakeType, PastryType, PizzaType, ProductType
from bakery.models import Market
from bakery.repositories.product_query import resolve_kind


async def _page(uow, product_filter=None, sort=None, page=None):
    return await uow.products.get_page(
        product_filter or ProductFilter(),
        sort or ProductSort(),
        page or PageRequest(page_number=1, page_size=10),
    )


@pytest.fixture
async def catalogue(seed, products):
    """A pizza at 8, a cake at 30, a pastry at 1.80 and a bread at 4"""
    items = (
        products.pizza(price="8.00"),
        products.cake(price="30.00", cake_type=CakeType.CHEESECAKE),
        products.pastry(price="1.80"),
        products.bread(price="4.00"),
    )
    await seed(*items)
    return items


class TestFilterComposition:

    async def test_price_range(self, uow, catalogue):
        result = await _page(uow, ProductFilter(min_price=Decimal("5"), max_price=Decimal("20")))

        assert [p.name for p in result.value.items] == ["Margherita"]
        assert result.value.total_count == 1

    async def test_inverted_price_range_is_invalid_input(self, uow, catalogue):
        result = await _page(uow, ProductFilter(min_price=Decimal("20"), max_price=Decimal("5")))

        assert result.error.kind == ErrorKind.INVALID_INPUT

    async def test_discriminator(self, uow, catalogue):
        result = await _page(uow, ProductFilter(product_type=ProductType.CAKE))

        assert [p.product_type for p in result.value.items] == [ProductType.CAKE]

    async def test_matching_subtype_filter(self, uow, catalogue):
        matching = await _page(uow, ProductFilter(product_type=ProductType.CAKE, cake_type=CakeType.CHEESECAKE))
        other = await _page(uow, ProductFilter(product_type=ProductType.CAKE, cake_type=CakeType.TORTE))

        assert len(matching.value.items) == 1
        assert other.value.items == []

    async def test_mismatched_subtype_filter_is_ignored(self, uow, catalogue):
        """A pastry filter does not narrow a cake query"""
        result = await _page(
            uow,
            ProductFilter(product_type=ProductType.CAKE, pastry_type=PastryType.PUFF_PASTRY),
        )

        assert [p.product_type for p in result.value.items] == [ProductType.CAKE]

    async def test_subtype_filter_implies_its_kind(self, uow, catalogue):
        result = await _page(uow, ProductFilter(pizza_type=PizzaType.MARGHERITA))

        assert [p.name for p in result.value.items] == ["Margherita"]

    def test_resolve_kind(self):
        assert resolve_kind(ProductFilter()) is None
        assert resolve_kind(ProductFilter(pastry_type=PastryType.MERINGUE)) == ProductType.PASTRY
        assert resolve_kind(
            ProductFilter(product_type=ProductType.BREAD, pizza_type=PizzaType.ROMAN)
        ) == ProductType.BREAD

    async def test_availability(self, uow, seed, products):
        await seed(products.pizza(), products.bread(is_available=False))

        available = await _page(uow, ProductFilter(is_available=True))
        unavailable = await _page(uow, ProductFilter(is_available=False))

        assert [p.name for p in available.value.items] == ["Margherita"]
        assert [p.name for p in unavailable.value.items] == ["Country Sourdough"]

    async def test_search_is_case_insensitive_on_name_and_description(self, uow, seed, products):
        await seed(
            products.pizza(name="Diavola", description="Spicy SALAMI and chili"),
            products.pastry(name="Salami Twist"),
            products.cake(),
        )

        result = await _page(uow, ProductFilter(search_term="salami"))

        assert sorted(p.name for p in result.value.items) == ["Diavola", "Salami Twist"]

    async def test_search_escapes_wildcards(self, uow, seed, products):
        await seed(products.pizza(name="Half_Price Pizza"), products.pizza(name="HalfXPrice"))

        result = await _page(uow, ProductFilter(search_term="half_"))

        assert [p.name for p in result.value.items] == ["Half_Price Pizza"]

    async def test_market_id_and_name(self, uow, seed, products):
        north = Market(name="North Market")
        south = Market(name="South Market")
        await seed(north, south)
        await seed(products.pizza(market_id=north.id), products.cake(market_id=south.id))

        by_id = await _page(uow, ProductFilter(market_id=south.id))
        by_name = await _page(uow, ProductFilter(market_name="north market"))

        assert [p.name for p in by_id.value.items] == ["Sacher"]
        assert [p.name for p in by_name.value.items] == ["Margherita"]

    async def test_soft_deleted_products_are_excluded(self, uow, seed, products):
        gone = products.pizza(name="Old Pizza")
        gone.mark_deleted()
        await seed(gone, products.pizza())

        result = await _page(uow)

        assert [p.name for p in result.value.items] == ["Margherita"]
        assert result.value.total_count == 1


class TestSorting:

    async def test_price_descending(self, uow, catalogue):
        result = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.PRICE, direction=SortDirection.DESCENDING))

        assert [p.price for p in result.value.items] == [
            Decimal("30.00"),
            Decimal("8.00"),
            Decimal("4.00"),
            Decimal("1.80"),
        ]

    async def test_category_follows_kind_order(self, uow, catalogue):
        result = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.CATEGORY))

        assert [p.product_type for p in result.value.items] == [
            ProductType.PIZZA,
            ProductType.BREAD,
            ProductType.CAKE,
            ProductType.PASTRY,
        ]

    async def test_name_sort_ignores_case(self, uow, seed, products):
        await seed(
            products.plain(name="banana bread"),
            products.plain(name="Apple Tart"),
            products.plain(name="cherry pie"),
        )

        ascending = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.NAME))
        descending = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.NAME, direction=SortDirection.DESCENDING))

        assert [p.name for p in ascending.value.items] == ["Apple Tart", "banana bread", "cherry pie"]
        assert [p.name for p in descending.value.items] == ["cherry pie", "banana bread", "Apple Tart"]

    async def test_name_ties_break_on_id(self, uow, seed, products):
        twins = [products.pizza(name="Twin") for _ in range(3)]
        await seed(*twins)

        first = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.NAME))
        second = await _page(uow, sort=ProductSort(sort_by=ProductSortBy.NAME))

        assert [p.id for p in first.value.items] == [p.id for p in second.value.items]
        assert [p.id for p in first.value.items] == sorted(p.id for p in twins)


class TestPaging:

    async def test_twenty_five_products_in_pages_of_ten(self, uow, seed, products):
        await seed(*[products.plain(name=f"Roll {i:02d}", price="1.00") for i in range(25)])

        pages = [await _page(uow, page=PageRequest(page_number=n, page_size=10)) for n in (1, 2, 3)]

        assert [len(p.value.items) for p in pages] == [10, 10, 5]
        assert all(p.value.total_count == 25 for p in pages)
        assert all(p.value.total_pages == 3 for p in pages)
        assert [p.value.has_next_page for p in pages] == [True, True, False]
        assert [p.value.has_previous_page for p in pages] == [False, True, True]
        assert pages[2].value.items[-1].name == "Roll 24"

    async def test_page_past_the_end_is_empty(self, uow, catalogue):
        result = await _page(uow, page=PageRequest(page_number=5, page_size=10))

        assert result.value.items == []
        assert result.value.total_count == 4

    @pytest.mark.parametrize("page_number, page_size", [(0, 10), (-1, 10), (1, 0), (1, 101)])
    async def test_invalid_paging(self, uow, page_number, page_size):
        result = await _page(uow, page=PageRequest(page_number=page_number, page_size=page_size))

        assert result.error.kind == ErrorKind.INVALID_PAGING
