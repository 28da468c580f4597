from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    quantity = Column(Integer, nullable=False)
    # cena z momentu zakupu, nigdy nie przeliczana z aktualnej ceny produktu
    price_at_purchase = Column(Numeric(18, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
    product = relationship("ProductModel", lazy="joined")

    @property
    def subtotal(self):
        return self.price_at_purchase * self.quantity
