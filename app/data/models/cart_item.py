# app/data/models/cart_item.py
from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartItemModel(Base):
    """
    Pozycja koszyka. Nazwa i cena to snapshot produktu z chwili dodania,
    checkout liczy koszt z tych pol, nie z katalogu.
    """

    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    name = Column(String, nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="u_cart_product"),
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity_positive"),
    )
