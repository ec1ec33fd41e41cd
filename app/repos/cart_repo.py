# app/repos/cart_repo.py
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.cart import CartModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, email: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.email == email)
            .options(selectinload(CartModel.items))
        ).scalar_one_or_none()

    def create(self, email: str) -> CartModel:
        cart = CartModel(email=email, version=1)
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def update_cart_version(self, cart_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # np. UPDATE carts SET version = 2 WHERE id = 1 AND version = 1
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount

    def rollback(self) -> None:
        self.db.rollback()
