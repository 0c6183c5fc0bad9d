# storefront/services/payment_bridge.py
from decimal import Decimal, ROUND_HALF_UP

import requests
from pydantic import ValidationError
from requests import RequestException

from storefront.data.models.order import OrderModel
from storefront.domain.errors import EmptyCart, NotAuthenticated, PaymentDeclined
from storefront.domain.schemas import CheckoutIn, OrderRequest, PaymentConfirmation, UserRead
from storefront.services.order_service import Charge, OrderOrchestrator, cart_signature
from storefront.utils.settings import PAYMENT_FUNCTION_URL, FUNCTION_BEARER_KEY, HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_SUCCESSFUL = "Payment successful"

#karta wysyla token, portfel (Google/Apple Pay) id metody platnosci
TOKEN_FIELDS = {
    "card": "token",
    "wallet": "paymentMethodId",
}


class PaymentBridge:
    """
    Checkout: obciazenie przez zewnetrzna funkcje platnosci, potem zamowienie.
    Zadnych ponowien POST-a - ryzyko podwojnego obciazenia.
    """

    def __init__(
        self,
        orchestrator: OrderOrchestrator,
        url: str | None = None,
        bearer_key: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.orchestrator = orchestrator
        self.url = url or PAYMENT_FUNCTION_URL
        self.bearer_key = FUNCTION_BEARER_KEY if bearer_key is None else bearer_key
        self.timeout = timeout

    def checkout(self, identity: UserRead | None, payload: CheckoutIn) -> OrderModel:
        if identity is None:
            raise NotAuthenticated()

        if payload.payment_method == "cod":
            raise PaymentDeclined("Cash on delivery not available at this moment.")

        lines = self.orchestrator.cart_service.list_lines(identity.id)
        if not lines:
            raise EmptyCart()

        quote = self.orchestrator.quote(lines, payload.shipping_method)
        address = payload.delivery.to_address()

        # funkcja platnosci bierze pelne jednostki waluty
        amount = quote.total.quantize(Decimal("1"), rounding=ROUND_HALF_UP)

        body = {
            TOKEN_FIELDS[payload.payment_method]: payload.token,
            "amount": int(amount),
            "name": payload.delivery.name,
            "email": payload.delivery.email,
            "address": address.model_dump(by_alias=True),
            "comment": "Payment for order",
        }

        confirmation = self.charge(body)

        return self.orchestrator.place_order(
            identity,
            OrderRequest(
                email=payload.delivery.email,
                name=payload.delivery.name,
                address=address,
                shipping_method=payload.shipping_method,
                payment_status="success",
            ),
            confirmation,
            charge=Charge(quote=quote, amount=amount, cart=cart_signature(lines)),
        )

    def charge(self, body: dict) -> PaymentConfirmation:
        logger.info(f"PaymentBridge POST {self.url} amount={body.get('amount')}")

        try:
            resp = requests.post(
                self.url,
                json=body,
                headers={"Authorization": f"Bearer {self.bearer_key}"},
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"Payment function unreachable: {e}")
            raise PaymentDeclined("Payment service unavailable")

        try:
            result = resp.json()
        except ValueError:
            logger.error(f"Payment function returned non-JSON response (status {resp.status_code})")
            raise PaymentDeclined()

        if not isinstance(result, dict) or result.get("message") != PAYMENT_SUCCESSFUL:
            message = result.get("message") if isinstance(result, dict) else None
            logger.warning(f"Payment declined: {message}")
            raise PaymentDeclined(message or None)

        # pieniadze juz pobrane - dziwny ksztalt pol nie moze zgubic zamowienia
        try:
            confirmation = PaymentConfirmation.model_validate(result)
        except ValidationError as e:
            logger.error(f"Unexpected payment confirmation fields, keeping raw response: {e}")
            confirmation = PaymentConfirmation(message=PAYMENT_SUCCESSFUL)

        return confirmation.with_payload(result)
