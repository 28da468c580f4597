# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import CartItemIn, CartItemUpdate, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user.id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except ShopError as e:
        raise to_http(e)


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user.id, item_id, payload.quantity)
    except ShopError as e:
        raise to_http(e)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user.id, item_id)
    except ShopError as e:
        raise to_http(e)


@router.delete("", response_model=CartOut)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.clear_cart(user.id)
    except ShopError as e:
        raise to_http(e)
