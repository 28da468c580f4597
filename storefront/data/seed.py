# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CartModel, ProductModel, UserModel
from storefront.services.auth_service import hash_password
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    ("Laptop", "High-performance laptop", "999.99", 50, "Electronics"),
    ("Wireless Mouse", "Ergonomic wireless mouse", "29.99", 200, "Electronics"),
    ("Mechanical Keyboard", "RGB mechanical keyboard", "79.99", 100, "Electronics"),
    ("USB-C Cable", "Fast charging USB-C cable", "12.99", 500, "Accessories"),
    ("Headphones", "Noise-cancelling headphones", "149.99", 75, "Electronics"),
]


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # seedujemy tylko pusta baze
        if not db.query(UserModel).filter(UserModel.email == ADMIN_EMAIL).first():
            admin = UserModel(
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                first_name="Admin",
                last_name="User",
                is_admin=True,
            )
            admin.cart = CartModel()
            db.add(admin)
            logger.info(f"Seeded admin user {ADMIN_EMAIL}")

        if not db.query(ProductModel).first():
            for name, description, price, stock, category in PRODUCTS:
                db.add(
                    ProductModel(
                        name=name,
                        description=description,
                        price=Decimal(price),
                        stock_quantity=stock,
                        category=category,
                        image_url="https://via.placeholder.com/300",
                        is_active=True,
                    )
                )
            logger.info(f"Seeded {len(PRODUCTS)} products")

        db.commit()
    finally:
        db.close()
