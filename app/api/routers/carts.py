#app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_catalog, get_current_user, get_lock_service
from app.data.database import get_db
from app.data.models.cart import CartModel
from app.data.models.user import UserModel
from app.domain.errors import CartError
from app.domain.schemas import CartOut, CartItemOut, ItemIn, ItemUpdateIn
from app.services.cart_service import CartService
from app.services.lock_service import LockService

router = APIRouter(prefix="/v1/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, catalog=catalog, lock_service=lock_service)


def to_cart_out(cart: CartModel) -> CartOut:
    return CartOut(
        email=cart.email,
        version=cart.version,
        items=[CartItemOut.model_validate(i) for i in cart.items],
        total=cart.total_cost(),
    )


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return to_cart_out(svc.get_cart_by_user(user))
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=CartOut, status_code=201)
def add_item(
    payload: ItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        cart = svc.add_product_to_cart(user, payload.product_id, payload.quantity)
        return to_cart_out(cart)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("", response_model=CartOut)
def update_item(
    payload: ItemUpdateIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        # ilosc 0 == usuniecie produktu
        if payload.quantity == 0:
            svc.delete_product_from_cart(user, payload.product_id)
            return Response(status_code=204)
        cart = svc.update_product_in_cart(user, payload.product_id, payload.quantity)
        return to_cart_out(cart)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/items/{product_id}", status_code=204)
def remove_item(
    product_id: int,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.delete_product_from_cart(user, product_id)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return Response(status_code=204)


@router.put("/checkout", status_code=204)
def checkout(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.checkout(user)
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return Response(status_code=204)
