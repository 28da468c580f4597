# storefront/services/checkout_service.py
from decimal import Decimal
from uuid import uuid4

from redis import RedisError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import (
    CheckoutInProgressError,
    EmptyCartError,
    InsufficientStockError,
    PaymentDeclinedError,
    PaymentError,
)
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import OrderOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.lock_service import LockService
from storefront.services.payment_gateway import PaymentGateway, PaymentResult, to_minor_units
from storefront.tasks.payments import refund_payment_task
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, PAYMENT_CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka + autoryzacji platnosci w zamowienie.

    1. lock per user (redis) - drugi rownolegly checkout dostaje 409
    2. koszyk nie moze byc pusty
    3. walidacja stanow PRZED platnoscia, bramka nie jest wolana jesli brakuje towaru
    4. total po aktualnych cenach, autoryzacja w bramce (bez retry)
    5. zamowienie + pozycje + compare-and-decrement stanow + czyszczenie koszyka
       w JEDNEJ transakcji
    6. blad w kroku 5 -> rollback calosci i zwrot autoryzowanej platnosci
    """

    def __init__(
        self,
        db: Session,
        payment_gateway: PaymentGateway,
        lock_service: LockService,
        currency: str = PAYMENT_CURRENCY,
    ):
        self.db = db
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.payment_gateway = payment_gateway
        self.lock_service = lock_service
        self.currency = currency

    def checkout(self, user_id: int, shipping_address: str, payment_method_token: str) -> OrderOut:
        lock_token = uuid4().hex

        if not self.lock_service.acquire_checkout_lock(user_id, lock_token, CHECKOUT_LOCK_TTL_SECONDS):
            raise CheckoutInProgressError()

        try:
            return self._checkout(user_id, shipping_address, payment_method_token)
        finally:
            self._release_lock(user_id, lock_token)

    def _release_lock(self, user_id: int, lock_token: str):
        # lock i tak wygasnie po TTL, blad redisa nie moze przykryc wyniku checkoutu
        try:
            self.lock_service.release_checkout_lock(user_id, lock_token)
        except RedisError as e:
            logger.error(f"Releasing checkout lock for user {user_id} failed: {e}")

    def _checkout(self, user_id: int, shipping_address: str, payment_method_token: str) -> OrderOut:
        logger.info(f"Checkout started for user {user_id}")

        cart = self.carts.get_cart_by_user(user_id)
        if not cart or not cart.items:
            raise EmptyCartError()

        items = list(cart.items)

        #walidacja stanow, nic jeszcze nie zapisane
        for item in items:
            if item.product.stock_quantity < item.quantity:
                raise InsufficientStockError(item.product.name)

        # cena zapamietana tutaj idzie i do totala i do price_at_purchase
        prices = {item.id: item.product.price for item in items}
        total = sum((prices[i.id] * i.quantity for i in items), Decimal("0.00"))

        payment = self._authorize(total, payment_method_token)

        try:
            order = self._persist_order(user_id, cart, items, prices, total, payment, shipping_address)
        except Exception:
            logger.error(
                f"Persisting order failed after payment {payment.reference} was authorized, rolling back"
            )
            self.db.rollback()
            self._void_payment(payment.reference)
            raise

        logger.info(f"Order {order.id} created for user {user_id}, total {total}")
        return OrderOut.model_validate(order)

    def _authorize(self, total: Decimal, payment_method_token: str) -> PaymentResult:
        amount = to_minor_units(total)
        try:
            payment = self.payment_gateway.authorize(amount, self.currency, payment_method_token)
        except PaymentError:
            logger.warning("Payment gateway error, nothing persisted")
            raise

        if not payment.success:
            logger.warning(f"Payment {payment.reference} declined with status {payment.status}")
            raise PaymentDeclinedError()

        logger.info(f"Payment {payment.reference} authorized for {amount} {self.currency}")
        return payment

    def _persist_order(
        self,
        user_id: int,
        cart: CartModel,
        items: list,
        prices: dict,
        total: Decimal,
        payment: PaymentResult,
        shipping_address: str,
    ) -> OrderModel:
        order = OrderModel(
            user_id=user_id,
            total_amount=total,
            status=OrderStatus.PROCESSING.value,
            payment_reference=payment.reference,
            shipping_address=shipping_address,
        )

        for item in items:
            order.items.append(
                OrderItemModel(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price_at_purchase=prices[item.id],
                )
            )

            # stan mogl zejsc miedzy walidacja a teraz (rownolegly checkout)
            if not self.products.decrement_stock(item.product_id, item.quantity):
                raise InsufficientStockError(item.product.name)

        self.orders.add_order(order)
        self.carts.clear_cart_items(cart.id)
        self.db.commit()

        return order

    def _void_payment(self, reference: str | None):
        if not reference:
            return

        try:
            result = self.payment_gateway.refund(reference)
        except PaymentError as e:
            logger.error(f"Voiding payment {reference} failed: {e.message}, scheduling retry")
        else:
            if result.success:
                logger.info(f"Payment {reference} voided with status {result.status}")
                return
            logger.error(f"Voiding payment {reference} ended with status {result.status}, scheduling retry")

        try:
            refund_payment_task.delay(reference)
        except Exception as e:
            logger.critical(f"Could not schedule refund for payment {reference}, manual reconciliation needed: {e}")
