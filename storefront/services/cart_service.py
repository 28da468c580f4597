# storefront/services/cart_service.py
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import InsufficientStockError, NotFoundError, ProductUnavailableError
from storefront.domain.schemas import CartOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y dla koszyka
    commands (add, update, remove, clear) modyfikuja stan
    query (get) - koszyk tworzony leniwie przy pierwszym dostepie
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: int) -> CartOut:
        cart = self.repo.get_or_create_cart(user_id)
        self.repo.commit()
        return CartOut.model_validate(cart)

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> CartOut:
        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise ProductUnavailableError()

        if product.stock_quantity < quantity:
            raise InsufficientStockError(product.name)

        cart = self.repo.get_or_create_cart(user_id)

        # Sprawdz czy produkt juz jest w koszyku
        existing_item = self.repo.get_cart_item(cart.id, product_id)

        if existing_item:
            new_quantity = existing_item.quantity + quantity
            #walidacja na laczna ilosc
            if product.stock_quantity < new_quantity:
                self.repo.rollback()
                raise InsufficientStockError(product.name)

            logger.info(
                f"Produkt {product_id} juz jest w koszyku {cart.id}, zwiekszam ilosc "
                f"z {existing_item.quantity} do {new_quantity}"
            )
            existing_item.quantity = new_quantity
        else:
            logger.info(f"Dodaje produkt {product_id} do koszyka {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        self._touch(cart)
        self.repo.commit()
        return self._reload(cart)

    def update_item(self, user_id: int, item_id: int, quantity: int) -> CartOut:
        item = self._get_item_or_404(item_id, user_id)

        if item.product.stock_quantity < quantity:
            raise InsufficientStockError(item.product.name)

        logger.info(f"Ustawiam ilosc pozycji {item_id} na {quantity}")
        item.quantity = quantity

        cart = item.cart
        self._touch(cart)
        self.repo.commit()
        return self._reload(cart)

    def remove_item(self, user_id: int, item_id: int) -> CartOut:
        item = self._get_item_or_404(item_id, user_id)
        cart = item.cart

        logger.info(f"Usuwanie pozycji {item_id} z koszyka {cart.id}")
        self.repo.delete_cart_item(item)

        self._touch(cart)
        self.repo.commit()
        return self._reload(cart)

    def clear_cart(self, user_id: int) -> CartOut:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        removed = self.repo.clear_cart_items(cart.id)
        logger.info(f"Wyczyszczono koszyk {cart.id}, usunieto {removed} pozycji")

        self._touch(cart)
        self.repo.commit()
        return self._reload(cart)

    def _get_item_or_404(self, item_id: int, user_id: int) -> CartItemModel:
        item = self.repo.get_item_for_user(item_id, user_id)
        if not item:
            raise NotFoundError("Cart item not found")
        return item

    @staticmethod
    def _touch(cart: CartModel):
        #onupdate nie odpali jesli zmienily sie tylko pozycje
        cart.updated_at = datetime.now(timezone.utc)

    def _reload(self, cart: CartModel) -> CartOut:
        # po commit obiekty sa expired, pozycje doczytaja sie od nowa
        return CartOut.model_validate(cart)
