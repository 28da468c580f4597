# storefront/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthenticationError, ForbiddenError, ShopError
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.payment_gateway import PaymentGateway, build_payment_gateway
from storefront.services.token_service import TokenService

_bearer = HTTPBearer(auto_error=False)


def to_http(exc: ShopError) -> HTTPException:
    return HTTPException(
        status_code=exc.status_code,
        detail={"message": exc.message, "code": exc.code},
    )


def get_token_service() -> TokenService:
    return TokenService()


def get_lock_service() -> LockService:
    return LockService()


def get_payment_gateway() -> PaymentGateway:
    return build_payment_gateway()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
    db: Session = Depends(get_db),
) -> UserModel:
    if credentials is None:
        raise to_http(AuthenticationError())

    user_id = tokens.resolve(credentials.credentials)
    user = UserRepo(db).get_user(user_id) if user_id is not None else None

    if not user:
        raise to_http(AuthenticationError("Invalid or expired token"))
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise to_http(ForbiddenError())
    return user
