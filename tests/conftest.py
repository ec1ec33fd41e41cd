import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PRODUCT_SERVICE_URL"] = ""
os.environ["JWT_SECRET"] = "test-secret"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import create_app
from app.api.deps import get_lock_service, get_token_service
from app.data.database import Base, get_db
from app.data.models import ProductModel, UserModel
from app.repos.product_repo import ProductRepo
from app.services.auth_service import hash_password
from app.services.cart_service import CartService
from app.services.token_service import TokenService
from app.utils.settings import JwtSettings

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


class InMemoryLockService:
    """Per-user lock with the same contract as LockService, without Redis."""

    def __init__(self):
        self.locks = {}

    def acquire_cart_lock(self, email, token, ttl):
        if email in self.locks:
            return False
        self.locks[email] = token
        return True

    def release_cart_lock(self, email, token):
        if self.locks.get(email) == token:
            del self.locks[email]
            return True
        return False


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db):
    sessions = []

    def make():
        session = TestingSessionLocal()
        sessions.append(session)
        return session

    yield make
    for session in sessions:
        session.close()


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def products(db):
    p1 = ProductModel(id=1, name="Running Shoes", category="Fashion", cost=Decimal("100"), rating=5)
    p2 = ProductModel(id=2, name="Badminton Racquet", category="Sports", cost=Decimal("50"), rating=4)
    db.add_all([p1, p2])
    db.commit()
    return p1, p2


def _make_user(db, email="crio-user@gmail.com", wallet=Decimal("1000"), address="ADDRESS_NOT_SET"):
    user = UserModel(
        email=email,
        name="crio-user",
        password_hash=hash_password("password1"),
        wallet_money=wallet,
        address=address,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def user_factory(db):
    def make(**kwargs):
        return _make_user(db, **kwargs)

    return make


@pytest.fixture
def user(user_factory):
    return user_factory(address="ITPL Main Road, Bangalore, Karnataka")


@pytest.fixture
def service(db, products, lock_service):
    return CartService(db=db, catalog=ProductRepo(db), lock_service=lock_service)


@pytest.fixture
def token_service():
    return TokenService(JwtSettings(secret="test-secret", access_expiration_minutes=30))


@pytest.fixture
def client(db, products, lock_service, token_service):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_token_service] = lambda: token_service
    return TestClient(app)
