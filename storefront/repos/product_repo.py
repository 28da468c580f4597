# storefront/repos/product_repo.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_active(
        self,
        search: str | None = None,
        category: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[ProductModel], int]:
        query = select(ProductModel).where(ProductModel.is_active.is_(True))

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern))
            )
        if category:
            query = query.where(ProductModel.category == category)
        if min_price is not None:
            query = query.where(ProductModel.price >= min_price)
        if max_price is not None:
            query = query.where(ProductModel.price <= max_price)

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        items = self.db.execute(
            query.order_by(ProductModel.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).scalars().all()

        return list(items), total

    def list_categories(self) -> list[str]:
        rows = self.db.execute(
            select(ProductModel.category)
            .where(ProductModel.is_active.is_(True), ProductModel.category.is_not(None))
            .distinct()
            .order_by(ProductModel.category)
        ).scalars().all()
        return list(rows)

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Compare-and-decrement w jednym UPDATE.
        UPDATE products SET stock_quantity = stock_quantity - q
        WHERE id = :id AND stock_quantity >= q
        0 rows affected -> ktos inny wykupil towar, stan nie schodzi ponizej zera
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(
                stock_quantity=ProductModel.stock_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def restore_stock(self, product_id: int, quantity: int) -> None:
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock_quantity=ProductModel.stock_quantity + quantity,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
