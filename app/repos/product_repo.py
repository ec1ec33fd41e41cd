# app/repos/product_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    """Katalog produktow z bazy, tylko odczyt."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self) -> List[ProductModel]:
        return list(self.db.execute(select(ProductModel).order_by(ProductModel.id)).scalars())
