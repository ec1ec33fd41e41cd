# app/data/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, Float, CheckConstraint

from app.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    rating = Column(Float, nullable=False, default=0)
    image = Column(String, nullable=True)

    __table_args__ = (CheckConstraint("cost >= 0", name="ck_product_cost_non_negative"),)
