# storefront/services/email_service.py
from datetime import datetime
from decimal import Decimal
from typing import List

import requests
from requests import RequestException

from storefront.celery_worker import celery_app
from storefront.domain.schemas import Address, CartLineOut
from storefront.utils.settings import EMAIL_FUNCTION_URL, FUNCTION_BEARER_KEY, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class EmailService:
    """
    Mail z potwierdzeniem zamowienia.
    Fire-and-forget: wrzucamy task do Celery i nie czekamy na wynik.
    """

    @staticmethod
    def send_order_email(
        user_name: str,
        user_email: str,
        lines: List[CartLineOut],
        address: Address,
        total: Decimal,
        order_id: int,
        order_date: datetime,
    ):
        payload = {
            "userName": user_name,
            "userEmail": user_email,
            "cartList": [line.model_dump(mode="json") for line in lines],
            "address": address.model_dump(by_alias=True),
            "cartTotal": float(total),
            "orderId": order_id,
            "orderDate": order_date.isoformat(),
        }
        send_order_email_task.delay(payload)


@celery_app.task(name="storefront.services.email_service.send_order_email_task")
def send_order_email_task(payload: dict):
    """
    Jedna proba, bez ponowien. Bledy tylko logujemy.
    """
    try:
        resp = requests.post(
            EMAIL_FUNCTION_URL,
            json=payload,
            headers={"Authorization": f"Bearer {FUNCTION_BEARER_KEY}"},
            timeout=HTTP_TIMEOUT_SECONDS,
        )
    except RequestException as e:
        logger.error(f"[EMAIL] Order {payload.get('orderId')}: sending failed: {e}")
        return {"order_id": payload.get("orderId"), "status": "failed"}

    if not resp.ok:
        logger.error(f"[EMAIL] Order {payload.get('orderId')}: sending failed with status {resp.status_code}")
        return {"order_id": payload.get("orderId"), "status": "failed"}

    logger.info(f"[EMAIL] Order {payload.get('orderId')}: confirmation sent to {payload.get('userEmail')}")
    return {"order_id": payload.get("orderId"), "status": "sent"}
