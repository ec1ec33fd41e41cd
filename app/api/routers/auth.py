# app/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_token_service
from app.data.database import get_db
from app.domain.errors import CartError
from app.domain.schemas import AuthOut, UserLogin, UserRead, UserRegister
from app.services.auth_service import AuthService
from app.services.token_service import TokenService

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: UserRegister,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        user = AuthService(db).register(payload.name, payload.email, payload.password)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"user": UserRead.model_validate(user), "tokens": tokens.generate_auth_tokens(user)}


@router.post("/login", response_model=AuthOut)
def login(
    payload: UserLogin,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    try:
        user = AuthService(db).login(payload.email, payload.password)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"user": UserRead.model_validate(user), "tokens": tokens.generate_auth_tokens(user)}
