# app/services/token_service.py
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict

import jwt

from app.data.models.user import UserModel
from app.utils.settings import JwtSettings


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class InvalidTokenError(Exception):
    pass


class TokenService:
    """
    Wystawianie i weryfikacja JWT.
    Konfiguracja (sekret, czas zycia) przekazywana jawnie w konstruktorze.
    """

    def __init__(self, config: JwtSettings):
        self.config = config

    def generate_token(
        self,
        user_id: int,
        expires: datetime,
        token_type: TokenType,
        secret: str | None = None,
    ) -> str:
        payload = {
            # PyJWT wymaga sub jako string
            "sub": str(user_id),
            "type": token_type.value,
            "iat": datetime.now(timezone.utc),
            "exp": expires,
        }
        return jwt.encode(payload, secret or self.config.secret, algorithm=self.config.algorithm)

    def generate_auth_tokens(self, user: UserModel) -> Dict[str, Any]:
        expires = datetime.now(timezone.utc) + timedelta(minutes=self.config.access_expiration_minutes)
        token = self.generate_token(user.id, expires, TokenType.ACCESS)
        return {
            "access": {
                "token": token,
                "expires": expires,
            }
        }

    def verify_token(self, token: str, token_type: TokenType = TokenType.ACCESS) -> Dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(str(e)) from e

        if payload.get("type") != token_type.value:
            raise InvalidTokenError("Wrong token type")
        return payload
