# storefront/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.get_cart_by_user(user_id)
        if cart:
            return cart

        # insert w savepoincie, przy rownoleglym pierwszym dostepie
        # drugi insert wywali sie na unique(user_id) i wtedy czytamy istniejacy
        try:
            with self.db.begin_nested():
                cart = CartModel(user_id=user_id)
                self.db.add(cart)
            return cart
        except IntegrityError:
            return self.get_cart_by_user(user_id)

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_item_for_user(self, item_id: int, user_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel)
            .join(CartModel, CartItemModel.cart_id == CartModel.id)
            .where(CartItemModel.id == item_id, CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_cart_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
