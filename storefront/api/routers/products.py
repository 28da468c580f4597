# storefront/api/routers/products.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin, to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import ProductCreate, ProductFilters, ProductOut, ProductUpdate
from storefront.services.product_service import ProductService
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(
    response: Response,
    search: str | None = None,
    category: str | None = None,
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    filters = ProductFilters(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        page=page,
        page_size=page_size,
    )
    products, total = ProductService(db).list_products(filters)

    response.headers["X-Total-Count"] = str(total)
    response.headers["X-Page"] = str(page)
    response.headers["X-Page-Size"] = str(page_size)
    return products


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    return ProductService(db).list_categories()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_product(product_id)
    except ShopError as e:
        raise to_http(e)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    _admin: UserModel = Depends(require_admin),
):
    return ProductService(db).create_product(payload)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    _admin: UserModel = Depends(require_admin),
):
    try:
        return ProductService(db).update_product(product_id, payload)
    except ShopError as e:
        raise to_http(e)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _admin: UserModel = Depends(require_admin),
):
    try:
        ProductService(db).delete_product(product_id)
    except ShopError as e:
        raise to_http(e)
    return Response(status_code=204)
