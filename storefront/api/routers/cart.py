#storefront/api/routers/cart.py
from typing import List, Optional

from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_identity, require_identity
from storefront.domain.schemas import (
    ActionResult,
    AddToCartIn,
    AdjustQuantityIn,
    CartLineOut,
    UserRead,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=List[CartLineOut])
def get_cart(
    identity: Optional[UserRead] = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    # niezalogowany = pusty koszyk, nie blad
    return svc.list_lines(identity.id if identity else None)


@router.post("/items", response_model=ActionResult)
def add_item(
    payload: AddToCartIn,
    identity: UserRead = Depends(require_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add(identity.id, payload.product_id)


@router.patch("/items/{product_id}", response_model=ActionResult)
def adjust_item(
    product_id: int,
    payload: AdjustQuantityIn,
    identity: UserRead = Depends(require_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.adjust_quantity(identity.id, product_id, payload.delta)


@router.delete("/items/{line_id}", response_model=ActionResult)
def remove_item(
    line_id: int,
    identity: UserRead = Depends(require_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove(identity.id, line_id)
