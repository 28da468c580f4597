from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.order_status import OrderStatus


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total_amount = Column(Numeric(18, 2), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)  # patrz OrderStatus
    payment_reference = Column(String(255), nullable=True)
    shipping_address = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    user = relationship("UserModel", back_populates="orders")
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
