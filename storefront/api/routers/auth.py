# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_token_service, to_http
from storefront.data.database import get_db
from storefront.domain.errors import ShopError
from storefront.domain.schemas import AuthOut, LoginIn, RegisterIn
from storefront.services.auth_service import AuthService
from storefront.services.token_service import TokenService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session, tokens: TokenService):
    return AuthService(db, tokens)


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    svc = get_service(db, tokens)
    try:
        return svc.register(payload)
    except ShopError as e:
        raise to_http(e)


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    svc = get_service(db, tokens)
    try:
        return svc.login(payload)
    except ShopError as e:
        raise to_http(e)
