# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_orchestrator, get_payment_bridge, require_identity
from storefront.domain.errors import (
    AuthError,
    ConflictError,
    EmptyCart,
    NotFoundError,
    PaymentDeclined,
    RemoteWriteError,
    StorefrontError,
)
from storefront.domain.schemas import CheckoutIn, OrderOut, UserRead
from storefront.services.order_service import OrderOrchestrator
from storefront.services.payment_bridge import PaymentBridge

router = APIRouter(tags=["orders"])


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    identity: UserRead = Depends(require_identity),
    bridge: PaymentBridge = Depends(get_payment_bridge),
):
    """
    Platnosc przez funkcje platnosci, potem zapis zamowienia.
    Mail i powiadomienie ida w tle.
    """
    try:
        order = bridge.checkout(identity, payload)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=e.message)
    except PaymentDeclined as e:
        raise HTTPException(status_code=402, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except RemoteWriteError as e:
        raise HTTPException(status_code=502, detail=f"{e.message} (step: {e.step})")

    return OrderOut.model_validate(order)


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: UserRead = Depends(require_identity),
    svc: OrderOrchestrator = Depends(get_orchestrator),
):
    try:
        return svc.get_order(order_id, identity.id)
    except AuthError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorefrontError as e:
        raise HTTPException(status_code=502, detail=e.message)
