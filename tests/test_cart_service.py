from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.data.models import CartItemModel, CartModel
from storefront.domain.errors import InsufficientStockError, NotFoundError, ProductUnavailableError
from storefront.services.cart_service import CartService


@pytest.fixture()
def service(db):
    return CartService(db)


def _carts_for(db, user_id):
    return db.execute(select(CartModel).where(CartModel.user_id == user_id)).scalars().all()


class TestGetCart:
    def test_creates_cart_lazily_once(self, db, service, make_user):
        user = make_user()
        db.delete(user.cart)
        db.commit()

        first = service.get_cart(user.id)
        second = service.get_cart(user.id)

        assert first.id == second.id
        assert first.items == []
        assert first.total_amount == Decimal("0.00")
        assert len(_carts_for(db, user.id)) == 1

    def test_totals_use_current_prices(self, db, service, make_user, make_product, put_in_cart):
        user = make_user()
        product = make_product(price="4.50", stock=10)
        put_in_cart(user, product, 2)

        product.price = Decimal("5.00")
        db.commit()

        cart = service.get_cart(user.id)
        assert cart.items[0].subtotal == Decimal("10.00")
        assert cart.total_amount == Decimal("10.00")


class TestAddItem:
    def test_adding_same_product_twice_merges_lines(self, db, service, make_user, make_product):
        user = make_user()
        product = make_product(stock=10)

        service.add_item(user.id, product.id, 2)
        cart = service.add_item(user.id, product.id, 3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        rows = db.execute(select(CartItemModel)).scalars().all()
        assert len(rows) == 1

    def test_inactive_product_is_rejected(self, service, make_user, make_product):
        user = make_user()
        product = make_product(is_active=False)

        with pytest.raises(ProductUnavailableError):
            service.add_item(user.id, product.id, 1)

    def test_missing_product_is_rejected(self, service, make_user):
        user = make_user()

        with pytest.raises(ProductUnavailableError):
            service.add_item(user.id, 999, 1)

    def test_quantity_above_stock_is_rejected(self, service, make_user, make_product):
        user = make_user()
        product = make_product(stock=2)

        with pytest.raises(InsufficientStockError):
            service.add_item(user.id, product.id, 3)

    def test_increment_is_revalidated_against_stock(self, db, service, make_user, make_product):
        user = make_user()
        product = make_product(stock=4)
        service.add_item(user.id, product.id, 3)

        with pytest.raises(InsufficientStockError):
            service.add_item(user.id, product.id, 2)

        db.expire_all()
        [item] = db.execute(select(CartItemModel)).scalars().all()
        assert item.quantity == 3

    def test_creates_cart_when_missing(self, db, service, make_user, make_product):
        user = make_user()
        db.delete(user.cart)
        db.commit()
        product = make_product()

        cart = service.add_item(user.id, product.id, 1)

        assert len(cart.items) == 1
        assert len(_carts_for(db, user.id)) == 1


class TestUpdateAndRemove:
    def test_update_overwrites_quantity(self, service, make_user, make_product, put_in_cart):
        user = make_user()
        item = put_in_cart(user, make_product(stock=10), 4)

        cart = service.update_item(user.id, item.id, 1)

        assert cart.items[0].quantity == 1

    def test_update_is_validated_against_stock(self, service, make_user, make_product, put_in_cart):
        user = make_user()
        item = put_in_cart(user, make_product(stock=3), 1)

        with pytest.raises(InsufficientStockError):
            service.update_item(user.id, item.id, 4)

    def test_cannot_touch_another_users_item(self, service, make_user, make_product, put_in_cart):
        owner = make_user()
        other = make_user()
        item = put_in_cart(owner, make_product(), 1)

        with pytest.raises(NotFoundError):
            service.update_item(other.id, item.id, 2)
        with pytest.raises(NotFoundError):
            service.remove_item(other.id, item.id)

    def test_remove_item(self, service, make_user, make_product, put_in_cart):
        user = make_user()
        keep = put_in_cart(user, make_product(name="Keep"), 1)
        drop = put_in_cart(user, make_product(name="Drop"), 1)

        cart = service.remove_item(user.id, drop.id)

        assert [i.id for i in cart.items] == [keep.id]

    def test_clear_cart_keeps_cart_row(self, db, service, make_user, make_product, put_in_cart):
        user = make_user()
        put_in_cart(user, make_product(name="A"), 1)
        put_in_cart(user, make_product(name="B"), 2)

        cart = service.clear_cart(user.id)

        assert cart.items == []
        assert cart.id == user.cart.id
        assert len(_carts_for(db, user.id)) == 1
