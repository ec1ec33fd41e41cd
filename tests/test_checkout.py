"""
Checkout: preconditions, snapshot pricing, wallet debit and rollback.
"""
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.domain.errors import ConflictError, InternalError, InvalidRequestError, NotFoundError
from app.data.models.user import UserModel
from app.repos.product_repo import ProductRepo
from app.services.cart_service import CartService


@pytest.fixture
def poor_user(user_factory):
    return user_factory(
        email="poor@gmail.com",
        wallet=Decimal("400"),
        address="ITPL Main Road, Bangalore, Karnataka",
    )


class TestCheckoutPreconditions:

    def test_without_cart(self, service, user):
        with pytest.raises(NotFoundError, match="User does not have a cart"):
            service.checkout(user)

    def test_empty_cart(self, service, user):
        service.add_product_to_cart(user, 1, 1)
        service.delete_product_from_cart(user, 1)

        with pytest.raises(InvalidRequestError, match="Empty cart"):
            service.checkout(user)

    def test_address_not_set(self, service, user_factory):
        homeless = user_factory(email="homeless@gmail.com")
        service.add_product_to_cart(homeless, 1, 1)

        with pytest.raises(InvalidRequestError, match="Address not set"):
            service.checkout(homeless)

        assert homeless.wallet_money == Decimal("1000")
        assert len(service.get_cart_by_user(homeless).items) == 1

    def test_insufficient_balance_changes_nothing(self, service, poor_user):
        service.add_product_to_cart(poor_user, 1, 5)

        with pytest.raises(InvalidRequestError, match="Wallet balance is not sufficient"):
            service.checkout(poor_user)

        assert poor_user.wallet_money == Decimal("400")
        cart = service.get_cart_by_user(poor_user)
        assert len(cart.items) == 1
        assert cart.total_cost() == Decimal("500")

    def test_failed_checkout_can_be_retried(self, service, poor_user):
        service.add_product_to_cart(poor_user, 1, 5)
        with pytest.raises(InvalidRequestError):
            service.checkout(poor_user)

        service.update_product_in_cart(poor_user, 1, 4)
        service.checkout(poor_user)

        assert poor_user.wallet_money == Decimal("0")
        assert service.get_cart_by_user(poor_user).items == []


class TestCheckoutSuccess:

    def test_empties_cart_and_debits_wallet(self, service, user):
        service.add_product_to_cart(user, 1, 5)

        assert service.checkout(user) is None

        assert service.get_cart_by_user(user).items == []
        assert user.wallet_money == Decimal("500")

    def test_cost_sums_all_items(self, service, user):
        service.add_product_to_cart(user, 1, 3)
        service.add_product_to_cart(user, 2, 4)

        service.checkout(user)

        assert user.wallet_money == Decimal("1000") - Decimal("300") - Decimal("200")

    def test_exact_balance_leaves_zero(self, service, user):
        service.add_product_to_cart(user, 1, 10)

        service.checkout(user)

        assert user.wallet_money == Decimal("0")

    def test_uses_snapshot_price(self, service, user, products, db):
        service.add_product_to_cart(user, 1, 2)
        p1, _ = products
        p1.cost = Decimal("300")
        db.commit()

        assert service.get_cart_by_user(user).total_cost() == Decimal("200")
        service.checkout(user)

        assert user.wallet_money == Decimal("800")

    def test_cart_stays_usable_after_checkout(self, service, user):
        service.add_product_to_cart(user, 1, 1)
        service.checkout(user)

        cart = service.add_product_to_cart(user, 1, 2)

        assert [(i.product_id, i.quantity) for i in cart.items] == [(1, 2)]

    def test_persisted_for_a_fresh_session(self, service, user, db, lock_service):
        service.add_product_to_cart(user, 1, 5)
        service.checkout(user)
        db.expire_all()

        fresh = CartService(db=db, catalog=ProductRepo(db), lock_service=lock_service)
        assert fresh.get_cart_by_user(user).items == []
        assert user.wallet_money == Decimal("500")


class TestCheckoutAtomicity:

    def test_write_failure_rolls_back_cart_and_wallet(self, service, user, monkeypatch):
        service.add_product_to_cart(user, 1, 5)

        def fail_commit():
            raise OperationalError("COMMIT", {}, Exception("connection reset"))

        monkeypatch.setattr(service.db, "commit", fail_commit)

        with pytest.raises(InternalError, match="Checkout failed"):
            service.checkout(user)

        monkeypatch.undo()
        assert user.wallet_money == Decimal("1000")
        assert len(service.get_cart_by_user(user).items) == 1

    def test_locked_cart_is_a_conflict(self, service, user, lock_service):
        service.add_product_to_cart(user, 1, 5)
        lock_service.acquire_cart_lock(user.email, "other-request", ttl=10)

        with pytest.raises(ConflictError):
            service.checkout(user)

        assert user.wallet_money == Decimal("1000")


class TestCheckoutWithStaleUser:

    def test_balance_is_reread_under_lock(self, service, user, lock_service, session_factory):
        service.add_product_to_cart(user, 1, 5)

        # drugi request zaladowal uzytkownika przed pierwszym checkoutem
        late_db = session_factory()
        late_user = late_db.get(UserModel, user.id)
        assert late_user.wallet_money == Decimal("1000")

        service.checkout(user)
        service.add_product_to_cart(user, 1, 1)

        late_service = CartService(db=late_db, catalog=ProductRepo(late_db), lock_service=lock_service)
        late_service.checkout(late_user)

        assert late_user.wallet_money == Decimal("400")
        service.db.expire_all()
        assert user.wallet_money == Decimal("400")

    def test_stale_balance_cannot_overspend(self, service, user, lock_service, session_factory):
        service.add_product_to_cart(user, 1, 6)

        late_db = session_factory()
        late_user = late_db.get(UserModel, user.id)

        service.checkout(user)
        service.add_product_to_cart(user, 1, 5)

        late_service = CartService(db=late_db, catalog=ProductRepo(late_db), lock_service=lock_service)
        with pytest.raises(InvalidRequestError, match="Wallet balance is not sufficient"):
            late_service.checkout(late_user)

        assert late_user.wallet_money == Decimal("400")
