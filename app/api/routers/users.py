from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.api.deps import get_current_user
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import CartError
from app.domain.schemas import AddressIn, AddressOut, UserRead
from app.services.user_service import UserService

router = APIRouter(prefix="/v1/users", tags=["users"])


def _ensure_self(user_id: int, current: UserModel) -> None:
    if current.id != user_id:
        raise HTTPException(status_code=403, detail="User not authorized to access this resource")


@router.get("/{user_id}", response_model=UserRead | AddressOut)
def get_user(
    user_id: int,
    q: str | None = None,
    current: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _ensure_self(user_id, current)
    service = UserService(db)
    try:
        user = service.get_user_by_id(user_id)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    if q == "address":
        return AddressOut(address=user.address)
    return UserRead.model_validate(user)


@router.put("/{user_id}", response_model=AddressOut)
def set_address(
    user_id: int,
    payload: AddressIn,
    current: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _ensure_self(user_id, current)
    service = UserService(db)
    try:
        return AddressOut(address=service.set_address(current, payload.address))
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
