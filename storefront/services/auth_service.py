# storefront/services/auth_service.py
import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
)
from storefront.domain.schemas import AuthOut, LoginIn, RegisterIn, UserOut
from storefront.repos.user_repo import UserRepo
from storefront.services.token_service import TokenService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# bcrypt bierze max 72 bajty hasla
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        raise InvalidInputError("Password is too long")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(raw, password_hash.encode("utf-8"))


class AuthService:
    def __init__(self, db: Session, token_service: TokenService):
        self.db = db
        self.repo = UserRepo(db)
        self.token_service = token_service

    def register(self, payload: RegisterIn) -> AuthOut:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise EmailAlreadyRegisteredError()

        user = UserModel(
            email=email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            is_admin=False,
        )
        #koszyk zakladany razem z kontem
        user.cart = CartModel()

        try:
            self.repo.add_user(user)
            self.db.commit()
        except IntegrityError:
            # wyscig dwoch rejestracji na ten sam email
            self.db.rollback()
            raise EmailAlreadyRegisteredError()

        logger.info(f"Registered user {user.id}")
        return self._auth_response(user)

    def login(self, payload: LoginIn) -> AuthOut:
        user = self.repo.get_by_email(payload.email.lower())

        if not user or not verify_password(payload.password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        return self._auth_response(user)

    def _auth_response(self, user: UserModel) -> AuthOut:
        token = self.token_service.issue(user.id)
        return AuthOut(token=token, user=UserOut.model_validate(user))
