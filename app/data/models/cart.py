# app/data/models/cart.py
from decimal import Decimal
from typing import Dict

from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # jeden koszyk na uzytkownika
    email = Column(String, ForeignKey("users.email"), nullable=False, unique=True, index=True)
    version = Column(Integer, nullable=False, default=1)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    def items_by_product(self) -> Dict[int, "CartItemModel"]:
        return {item.product_id: item for item in self.items}

    def total_cost(self) -> Decimal:
        return sum((i.cost * i.quantity for i in self.items), Decimal("0.00"))
