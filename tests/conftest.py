import os

# przed importem storefront - settings czytaja env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYMENT_BACKEND"] = "fake"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api.deps import get_lock_service, get_payment_gateway, get_token_service
from storefront.data.database import Base, SessionLocal, engine, get_db, init_db
from storefront.data.models import CartItemModel, CartModel, ProductModel, UserModel
from storefront.main import create_app
from storefront.services.payment_gateway import FakePaymentGateway


class FakeLockService:
    """Lock w pamieci z tym samym kontraktem co LockService."""

    def __init__(self):
        self.locks: dict[int, str] = {}

    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        if user_id in self.locks:
            return False
        self.locks[user_id] = token
        return True

    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        if self.locks.get(user_id) != token:
            return False
        del self.locks[user_id]
        return True


class FakeTokenService:
    def __init__(self):
        self.tokens: dict[str, int] = {}

    def issue(self, user_id: int) -> str:
        token = f"token-{user_id}-{len(self.tokens)}"
        self.tokens[token] = user_id
        return token

    def resolve(self, token: str) -> int | None:
        return self.tokens.get(token)


@pytest.fixture()
def db():
    init_db()
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def gateway():
    return FakePaymentGateway()


@pytest.fixture()
def locks():
    return FakeLockService()


@pytest.fixture()
def tokens():
    return FakeTokenService()


@pytest.fixture()
def client(db, gateway, locks, tokens):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_lock_service] = lambda: locks
    app.dependency_overrides[get_token_service] = lambda: tokens
    return TestClient(app)


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(is_admin: bool = False, email: str | None = None) -> UserModel:
        counter["n"] += 1
        user = UserModel(
            email=email or f"user{counter['n']}@example.com",
            password_hash="not-a-real-hash",
            first_name="Jan",
            last_name="Kowalski",
            is_admin=is_admin,
        )
        user.cart = CartModel()
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def make_product(db):
    def _make(
        name: str = "Widget",
        price: str = "10.00",
        stock: int = 5,
        category: str | None = "Gadgets",
        is_active: bool = True,
        description: str | None = None,
    ) -> ProductModel:
        product = ProductModel(
            name=name,
            description=description,
            price=Decimal(price),
            stock_quantity=stock,
            category=category,
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture()
def put_in_cart(db):
    def _put(user: UserModel, product: ProductModel, quantity: int) -> CartItemModel:
        item = CartItemModel(cart_id=user.cart.id, product_id=product.id, quantity=quantity)
        db.add(item)
        db.commit()
        return item

    return _put


@pytest.fixture()
def auth_headers(tokens):
    def _headers(user: UserModel) -> dict:
        return {"Authorization": f"Bearer {tokens.issue(user.id)}"}

    return _headers
