# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_current_user,
    get_lock_service,
    get_payment_gateway,
    require_admin,
    to_http,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import CheckoutIn, OrderOut, OrderStatusUpdate
from storefront.services.checkout_service import CheckoutService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import PaymentGateway
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    locks: LockService = Depends(get_lock_service),
):
    """
    Zamienia koszyk w zamowienie: walidacja stanow, platnosc, zapis, czyszczenie koszyka.
    """
    svc = CheckoutService(db, payment_gateway=gateway, lock_service=locks)
    try:
        return svc.checkout(user.id, payload.shipping_address, payload.payment_method_id)
    except ShopError as e:
        raise to_http(e)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return OrderService(db).list_orders(user.id)


# musi byc przed /{order_id}
@router.get("/all", response_model=List[OrderOut])
def list_all_orders(
    response: Response,
    status: OrderStatus | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    _admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    orders, total = OrderService(db).list_all_orders(status, page, page_size)
    response.headers["X-Total-Count"] = str(total)
    return orders


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).get_order(order_id, user)
    except ShopError as e:
        raise to_http(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    _admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).update_status(order_id, payload.status)
    except ShopError as e:
        raise to_http(e)


@router.delete("/{order_id}", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).cancel_order(order_id, user.id)
    except ShopError as e:
        raise to_http(e)
