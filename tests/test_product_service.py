from decimal import Decimal

import pytest

from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import ProductCreate, ProductFilters, ProductUpdate
from storefront.services.product_service import ProductService


@pytest.fixture()
def service(db):
    return ProductService(db)


@pytest.fixture()
def catalog(make_product):
    return {
        "laptop": make_product(name="Laptop", price="999.99", category="Electronics",
                               description="Fast machine"),
        "mouse": make_product(name="Wireless Mouse", price="29.99", category="Electronics"),
        "book": make_product(name="Cookbook", price="15.00", category="Books",
                             description="Recipes for a wireless kitchen"),
        "hidden": make_product(name="Old Mouse", price="5.00", category="Legacy", is_active=False),
    }


def _names(products):
    return [p.name for p in products]


class TestListProducts:
    def test_only_active_products(self, service, catalog):
        products, total = service.list_products(ProductFilters())

        assert total == 3
        assert "Old Mouse" not in _names(products)

    def test_search_matches_name_and_description(self, service, catalog):
        products, total = service.list_products(ProductFilters(search="WIRELESS"))

        assert total == 2
        assert set(_names(products)) == {"Wireless Mouse", "Cookbook"}

    def test_category_and_price_range(self, service, catalog):
        products, _ = service.list_products(ProductFilters(category="Electronics"))
        assert set(_names(products)) == {"Laptop", "Wireless Mouse"}

        products, _ = service.list_products(
            ProductFilters(min_price=Decimal("15.00"), max_price=Decimal("30.00"))
        )
        assert set(_names(products)) == {"Wireless Mouse", "Cookbook"}

    def test_pagination_reports_full_total(self, service, catalog):
        page, total = service.list_products(ProductFilters(page=2, page_size=2))

        assert total == 3
        assert _names(page) == ["Cookbook"]


class TestProductCommands:
    def test_create_product_is_active(self, service):
        product = service.create_product(
            ProductCreate(name="Desk", price=Decimal("120.50"), stock_quantity=3)
        )

        assert product.id is not None
        assert product.is_active
        assert product.price == Decimal("120.50")

    def test_partial_update_keeps_other_fields(self, service, make_product):
        product = make_product(name="Lamp", price="40.00", stock=7, category="Home")

        updated = service.update_product(product.id, ProductUpdate(price=Decimal("35.00")))

        assert updated.price == Decimal("35.00")
        assert updated.name == "Lamp"
        assert updated.stock_quantity == 7
        assert updated.category == "Home"

    def test_soft_delete_hides_product_from_listing(self, service, catalog):
        service.delete_product(catalog["laptop"].id)

        products, total = service.list_products(ProductFilters())
        assert total == 2
        assert "Laptop" not in _names(products)
        # szczegoly nadal dostepne dla historycznych zamowien
        assert service.get_product(catalog["laptop"].id).is_active is False

    def test_missing_product(self, service):
        with pytest.raises(NotFoundError):
            service.get_product(404)
        with pytest.raises(NotFoundError):
            service.update_product(404, ProductUpdate(name="x"))
        with pytest.raises(NotFoundError):
            service.delete_product(404)


def test_categories_are_distinct_sorted_and_active_only(service, catalog, make_product):
    make_product(name="No category", category=None)

    assert service.list_categories() == ["Books", "Electronics"]
