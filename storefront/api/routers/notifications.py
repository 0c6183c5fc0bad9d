from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_identity, get_notification_reader
from storefront.domain.schemas import NotificationOut, UserRead
from storefront.services.notification_service import NotificationReader

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationOut])
def list_notifications(
    from_: int = Query(0, ge=0, alias="from"),
    to: int = Query(20, ge=0),
    identity: Optional[UserRead] = Depends(get_identity),
    reader: NotificationReader = Depends(get_notification_reader),
):
    return reader.list_notifications(identity.id if identity else None, from_, to)
