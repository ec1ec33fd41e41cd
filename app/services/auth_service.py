# app/services/auth_service.py
import hashlib
import hmac
import os

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.errors import InvalidRequestError, UnauthorizedError
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

_PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: bytes | None = None) -> str:
    """PBKDF2-SHA256, zapis jako "salt$hash" w hex."""
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(plain_password: str, password_hash: str) -> bool:
    salt_hex, _, _ = password_hash.partition("$")
    expected = hash_password(plain_password, bytes.fromhex(salt_hex))
    return hmac.compare_digest(expected, password_hash)


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, name: str, email: str, password: str) -> UserModel:
        if self.repo.get_user_by_email(email):
            raise InvalidRequestError("Email already taken")

        user = UserModel(name=name, email=email, password_hash=hash_password(password))
        try:
            created = self.repo.create_user(user)
        except IntegrityError as e:
            self.repo.db.rollback()
            raise InvalidRequestError("Email already taken") from e

        logger.info(f"Registered user {created.id} ({email})")
        return created

    def login(self, email: str, password: str) -> UserModel:
        user = self.repo.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Incorrect email or password")
        return user
