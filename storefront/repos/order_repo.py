# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, func, update
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_for_user(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: int) -> list[OrderModel]:
        rows = self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        ).scalars().all()
        return list(rows)

    def list_all(
        self,
        status: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel)
        if status:
            query = query.where(OrderModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        rows = self.db.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        ).scalars().all()

        return list(rows), total

    def transition_status(self, order_id: int, from_statuses, to_status: str) -> bool:
        """
        Compare-and-set statusu w jednym UPDATE.
        0 rows affected -> ktos inny zmienil status w miedzyczasie
        """
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status.in_(list(from_statuses)))
            .values(status=to_status, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
