# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    OrderNotCancellableError,
)
from storefront.domain.order_status import CANCELLABLE_STATUSES, OrderStatus, can_transition
from storefront.domain.schemas import OrderOut
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien po checkoucie.
    Tworzenie zamowienia jest w CheckoutService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)

    def list_orders(self, user_id: int) -> list[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_for_user(user_id)]

    def list_all_orders(
        self,
        status: OrderStatus | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[OrderOut], int]:
        orders, total = self.repo.list_all(
            status=status.value if status else None,
            page=page,
            page_size=page_size,
        )
        return [OrderOut.model_validate(o) for o in orders], total

    def get_order(self, order_id: int, user: UserModel) -> OrderOut:
        """
        Use Case: Pobranie zamowienia.
        Admin widzi wszystkie, zwykly user tylko swoje - cudze to 404.
        """
        if user.is_admin:
            order = self.repo.get_order(order_id)
        else:
            order = self.repo.get_order_for_user(order_id, user.id)

        if not order:
            raise NotFoundError("Order not found")

        return OrderOut.model_validate(order)

    def update_status(self, order_id: int, status: OrderStatus) -> OrderOut:
        """
        Use Case: Zmiana statusu (admin).
        Walidacja przez tabele przejsc, przejscie na Cancelled oddaje towar na stan.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        current = OrderStatus(order.status)
        if not can_transition(current, status):
            raise InvalidStatusTransitionError(current.value, status.value)

        # status mogl sie zmienic od odczytu, przejscie tylko z tego co widzielismy
        if not self.repo.transition_status(order.id, [current.value], status.value):
            self.db.rollback()
            raise InvalidStatusTransitionError(current.value, status.value)

        if status == OrderStatus.CANCELLED:
            self._restore_stock(order)

        self.db.commit()

        logger.info(f"Order {order.id} status {current.value} -> {status.value}")
        return OrderOut.model_validate(order)

    def cancel_order(self, order_id: int, user_id: int) -> OrderOut:
        """
        Use Case: Anulowanie zamowienia przez wlasciciela.
        Tylko z Pending/Processing, towar wraca na stan, bez zwrotu platnosci.
        """
        order = self.repo.get_order_for_user(order_id, user_id)
        if not order:
            raise NotFoundError("Order not found")

        if OrderStatus(order.status) not in CANCELLABLE_STATUSES:
            raise OrderNotCancellableError()

        # drugi rownolegly cancel nie moze oddac towaru drugi raz
        cancellable = [s.value for s in CANCELLABLE_STATUSES]
        if not self.repo.transition_status(order.id, cancellable, OrderStatus.CANCELLED.value):
            self.db.rollback()
            raise OrderNotCancellableError()

        self._restore_stock(order)
        self.db.commit()

        logger.info(f"Order {order.id} cancelled by user {user_id}")
        return OrderOut.model_validate(order)

    def _restore_stock(self, order: OrderModel):
        for item in order.items:
            self.products.restore_stock(item.product_id, item.quantity)
