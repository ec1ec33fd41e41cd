# app/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.data.models.user import UserModel
from app.repos.product_repo import ProductRepo
from app.repos.user_repo import UserRepo
from app.services.lock_service import LockService
from app.services.product_client import ProductClient
from app.services.token_service import InvalidTokenError, TokenService, TokenType
from app.utils.settings import JwtSettings, PRODUCT_SERVICE_URL

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/login")


def get_token_service() -> TokenService:
    return TokenService(JwtSettings.from_env())


def get_lock_service() -> LockService:
    return LockService()


def get_catalog(db: Session = Depends(get_db)):
    # PRODUCT_SERVICE_URL ustawiony -> katalog z zewnetrznego serwisu
    if PRODUCT_SERVICE_URL:
        return ProductClient()
    return ProductRepo(db)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> UserModel:
    try:
        payload = tokens.verify_token(token, TokenType.ACCESS)
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Please authenticate")

    user = UserRepo(db).get_user(int(payload["sub"]))
    if not user:
        raise HTTPException(status_code=401, detail="Please authenticate")
    return user
