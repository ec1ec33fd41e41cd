# app/services/cart_service.py
import uuid
from contextlib import contextmanager
from typing import Iterator, Protocol

from pydantic import ValidationError
from redis.exceptions import RedisError
from requests import RequestException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.database import unit_of_work
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.user import UserModel
from app.domain.errors import (
    ConflictError,
    InternalError,
    InvalidRequestError,
    NotFoundError,
)
from app.repos.cart_repo import CartRepo
from app.services.lock_service import LockService
from app.utils.settings import CART_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductCatalog(Protocol):
    def find_by_id(self, product_id: int): ...


class CartService:
    """
    Use case'y domeny cart.
    query (get) tylko odczyt, commands (add, update, delete, checkout) modyfikuja stan
    pod lockiem uzytkownika i z optimistic locking na wersji koszyka.
    """

    def __init__(
        self,
        db: Session,
        catalog: ProductCatalog,
        lock_service: LockService,
    ):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = catalog
        self.lock_service = lock_service

    #query - odczyt
    def get_cart_by_user(self, user: UserModel) -> CartModel:
        cart = self.repo.find_by_user(user.email)
        if not cart:
            raise NotFoundError("User does not have a cart")
        return cart

    #commands
    def add_product_to_cart(self, user: UserModel, product_id: int, quantity: int) -> CartModel:
        with self._user_lock(user):
            cart = self.repo.find_by_user(user.email)
            if not cart:
                cart = self._create_cart(user)

            product = self._find_product(product_id)
            if not product:
                raise InvalidRequestError("Product doesn't exist in database")

            if product_id in cart.items_by_product():
                raise InvalidRequestError(
                    "Product already in cart. Use the cart sidebar to update or remove product from cart"
                )

            logger.info(f"Adding product {product_id} x{quantity} to cart of {user.email}")
            cart.items.append(
                CartItemModel(
                    product_id=product.id,
                    name=product.name,
                    cost=product.cost,
                    quantity=quantity,
                )
            )
            self._save(cart, "Adding product failed")
            return cart

    def update_product_in_cart(self, user: UserModel, product_id: int, quantity: int) -> CartModel:
        with self._user_lock(user):
            if not self._find_product(product_id):
                raise InvalidRequestError("Product doesn't exist in database")

            cart = self.repo.find_by_user(user.email)
            if not cart:
                raise InvalidRequestError(
                    "User does not have a cart. Use POST to create cart and add a product"
                )

            item = cart.items_by_product().get(product_id)
            if item is None:
                raise InvalidRequestError("Product not in cart")

            logger.info(
                f"Updating product {product_id} in cart of {user.email}: "
                f"{item.quantity} -> {quantity}"
            )
            item.quantity = quantity
            self._save(cart, "Updating product failed")
            return cart

    def delete_product_from_cart(self, user: UserModel, product_id: int) -> None:
        with self._user_lock(user):
            cart = self.repo.find_by_user(user.email)
            if not cart:
                raise InvalidRequestError("User does not have a cart")

            item = cart.items_by_product().get(product_id)
            if item is None:
                raise InvalidRequestError("Product not in cart")

            logger.info(f"Removing product {product_id} from cart of {user.email}")
            cart.items.remove(item)
            self._save(cart, "Deleting product failed")

    def checkout(self, user: UserModel) -> None:
        #koszyk i portfel w jednej transakcji, albo oba sie zmieniaja albo zaden
        with self._user_lock(user):
            cart = self.repo.find_by_user(user.email)
            if not cart:
                raise NotFoundError("User does not have a cart")

            if not cart.items:
                raise InvalidRequestError("Empty cart")

            # saldo czytane pod lockiem, obiekt z get_current_user moze byc nieaktualny
            try:
                self.db.refresh(user, with_for_update=True)
            except SQLAlchemyError as e:
                raise InternalError("Checkout failed") from e

            if not user.has_set_non_default_address():
                raise InvalidRequestError("Address not set")

            # cena ze snapshotu pozycji, nie z katalogu
            cart_cost = cart.total_cost()
            if cart_cost > user.wallet_money:
                logger.warning(
                    f"Checkout rejected for {user.email}: cost {cart_cost} > wallet {user.wallet_money}"
                )
                raise InvalidRequestError("Wallet balance is not sufficient")

            try:
                with unit_of_work(self.db):
                    cart.items.clear()
                    user.wallet_money = user.wallet_money - cart_cost
                    self._bump_version(cart)
            except SQLAlchemyError as e:
                logger.error(f"Checkout failed for {user.email}, rolled back: {e}")
                raise InternalError("Checkout failed") from e

            logger.info(f"Checkout of {user.email} done, charged {cart_cost}")

    def _find_product(self, product_id: int):
        try:
            return self.catalog.find_by_id(product_id)
        except (RequestException, ValidationError) as e:
            logger.error(f"Product lookup failed for {product_id}: {e}")
            raise InternalError("Product lookup failed") from e

    def _create_cart(self, user: UserModel) -> CartModel:
        try:
            cart = self.repo.create(user.email)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error while creating the cart for {user.email}: {e}")
            raise InternalError("User cart creation failed") from e

        logger.info(f"Created cart {cart.id} for {user.email}")
        return cart

    def _save(self, cart: CartModel, failure_message: str) -> None:
        try:
            with unit_of_work(self.db):
                self._bump_version(cart)
        except SQLAlchemyError as e:
            logger.error(f"Error while saving cart {cart.id}: {e}")
            raise InternalError(failure_message) from e

    def _bump_version(self, cart: CartModel) -> None:
        # Optimistic locking, rowcount 0 -> ktos inny zmienil koszyk
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1},
        )
        if rowcount == 0:
            raise ConflictError("Cart was modified by another request")

    @contextmanager
    def _user_lock(self, user: UserModel) -> Iterator[None]:
        token = uuid.uuid4().hex
        try:
            locked = self.lock_service.acquire_cart_lock(
                email=user.email,
                token=token,
                ttl=CART_LOCK_TTL_SECONDS,
            )
        except RedisError as e:
            logger.error(f"Cart lock unavailable for {user.email}: {e}")
            raise InternalError("Cart lock unavailable") from e

        if not locked:
            raise ConflictError("Cart is being modified by another request")

        try:
            yield
        finally:
            try:
                self.lock_service.release_cart_lock(user.email, token)
            except RedisError as e:
                # lock i tak wygasnie po TTL
                logger.warning(f"Failed to release cart lock for {user.email}: {e}")
