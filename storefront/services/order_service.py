# storefront/services/order_service.py
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Tuple

from tenacity import RetryError

from storefront.data.gateway import CONFLICT, DataGateway
from storefront.data.models.notification import ORDER_PLACED
from storefront.data.models.order import OrderModel
from storefront.domain.errors import (
    AuthError,
    CartChangedDuringCheckout,
    EmptyCart,
    NotAuthenticated,
    NotFoundError,
    OrderInsertFailed,
    OrderItemsInsertFailed,
    PaymentLogInsertFailed,
    RemoteWriteError,
    SideEffectError,
    StorefrontError,
    TrackingCodeExhausted,
)
from storefront.domain.schemas import (
    CartLineOut,
    OrderOut,
    OrderQuote,
    OrderRequest,
    PaymentConfirmation,
    UserRead,
)
from storefront.repos.notification_repo import NotificationRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.email_service import EmailService
from storefront.services.tracking import TrackingCodeGenerator, TrackingCodeTaken
from storefront.utils.retry import collision_retrying
from storefront.utils.settings import CURRENCY, EXPRESS_SHIPPING_FEE, TRACKING_CODE_MAX_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def cart_signature(lines: List[CartLineOut]) -> Tuple[Tuple[int, int, Decimal], ...]:
    return tuple(sorted((line.product_id, line.quantity, line.amount) for line in lines))


@dataclass(frozen=True)
class Charge:
    """Co faktycznie obciazono: wycena koszyka i kwota wyslana do procesora."""

    quote: OrderQuote
    amount: Decimal
    cart: Tuple[Tuple[int, int, Decimal], ...]


@dataclass
class Placement:
    """Stan jednego skladania zamowienia, przekazywany miedzy krokami."""

    identity: UserRead
    request: OrderRequest
    confirmation: PaymentConfirmation
    lines: List[CartLineOut]
    quote: OrderQuote
    delivery_date: datetime
    tracking_number: str
    charged_amount: Decimal
    order: OrderModel | None = None


@dataclass(frozen=True)
class OrderStep:
    name: str
    run: Callable[[Placement], None]


class OrderOrchestrator:
    """
    Use Case: zlozenie zamowienia po udanej platnosci.

    Baza nie daje transakcji na wiele wierszy, wiec kroki ida po kolei:
    -krytyczne (order, pozycje, log platnosci) - blad przerywa reszte
    -best-effort (mail, powiadomienie, czyszczenie koszyka) - blad tylko logujemy
    """

    def __init__(
        self,
        gateway: DataGateway,
        cart_service: CartService,
        email_service: EmailService | None = None,
        rng: random.Random | None = None,
        max_tracking_attempts: int = TRACKING_CODE_MAX_ATTEMPTS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repo = OrderRepo(gateway)
        self.notifications = NotificationRepo(gateway)
        self.cart_service = cart_service
        self.email_service = email_service or EmailService()
        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.tracking = TrackingCodeGenerator(
            exists=self._tracking_number_taken,
            max_attempts=max_tracking_attempts,
            rng=self.rng,
        )

        self.critical_steps = (
            OrderStep("order", self._insert_order),
            OrderStep("order_items", self._insert_items),
            OrderStep("payment_log", self._insert_payment_log),
        )
        self.best_effort_steps = (
            OrderStep("order_email", self._send_order_email),
            OrderStep("notification", self._insert_notification),
            OrderStep("cart_clear", self._clear_cart),
        )

    # =====================================================
    # QUERY
    # =====================================================
    def quote(self, lines: List[CartLineOut], shipping_method: str) -> OrderQuote:
        subtotal = CartService.subtotal(lines).quantize(CENT)
        fee = Decimal(EXPRESS_SHIPPING_FEE if shipping_method == "express" else 0).quantize(CENT)
        return OrderQuote(subtotal=subtotal, shipping_fee=fee, total=subtotal + fee)

    def delivery_estimate(self, shipping_method: str) -> datetime:
        #szacunek do wyswietlenia, nie zobowiazanie przewoznika
        if shipping_method == "free":
            days = self.rng.randint(7, 23)
        else:
            days = self.rng.randint(1, 3)
        return self.clock() + timedelta(days=days)

    def get_order(self, order_id: int, user_id: str) -> OrderOut:
        res = self.repo.get_order(order_id)

        if res.not_found:
            raise NotFoundError(f"Order {order_id} not found")
        if not res.ok:
            raise StorefrontError(res.error.message)

        if res.data.user_id != user_id:
            raise AuthError("Access to order denied")

        return OrderOut.model_validate(res.data)

    def find_orders_missing_items(self) -> List[int]:
        """Zamowienia bez pozycji - slad po checkoutcie przerwanym w polowie."""
        res = self.repo.orders_without_items()
        if not res.ok:
            raise StorefrontError(res.error.message)
        return [order.id for order in res.data]

    # =====================================================
    # COMMAND
    # =====================================================
    def place_order(
        self,
        identity: UserRead | None,
        request: OrderRequest,
        confirmation: PaymentConfirmation,
        charge: Charge | None = None,
    ) -> OrderModel:
        if identity is None:
            raise NotAuthenticated()

        #koszyk zawsze na nowo z bazy, nie ufamy temu co ma klient
        lines = self.cart_service.list_lines(identity.id)
        if not lines:
            raise EmptyCart()

        quote = self.quote(lines, request.shipping_method)
        if charge is not None and (quote.total != charge.quote.total or cart_signature(lines) != charge.cart):
            logger.error(
                f"Cart of user {identity.id} changed during checkout: charged {charge.amount} "
                f"(transaction {confirmation.transaction_id}), cart now totals {quote.total} - no order written"
            )
            raise CartChangedDuringCheckout()

        placement = Placement(
            identity=identity,
            request=request,
            confirmation=confirmation,
            lines=lines,
            quote=quote,
            delivery_date=self.delivery_estimate(request.shipping_method),
            tracking_number=self.tracking.next_code(),
            charged_amount=charge.amount if charge is not None else quote.total,
        )

        self._run_critical(placement)
        self._run_best_effort(placement)

        logger.info(
            f"Order {placement.order.id} ({placement.tracking_number}) placed for user {identity.id}, "
            f"total {placement.quote.total}"
        )
        return placement.order

    def _run_critical(self, placement: Placement) -> None:
        for step in self.critical_steps:
            try:
                step.run(placement)
            except RemoteWriteError as e:
                order_id = placement.order.id if placement.order else None
                logger.error(
                    f"Critical step '{step.name}' failed (order {order_id}, user {placement.identity.id}): "
                    f"{e.message} - aborting"
                )
                raise

    def _run_best_effort(self, placement: Placement) -> None:
        for step in self.best_effort_steps:
            try:
                step.run(placement)
            except Exception as e:
                error = e if isinstance(e, SideEffectError) else SideEffectError(str(e))
                logger.warning(
                    f"[SideEffectError] step '{step.name}' failed for order {placement.order.id}: {error.message}"
                )

    def _tracking_number_taken(self, code: str) -> bool:
        res = self.repo.tracking_number_exists(code)
        if not res.ok:
            raise OrderInsertFailed(f"Tracking code check failed: {res.error.message}")
        return res.data

    # kroki krytyczne
    def _insert_order(self, placement: Placement) -> None:
        request = placement.request
        max_attempts = self.tracking.max_attempts

        # kod mogl zostac zajety miedzy sprawdzeniem a insertem - wtedy nowy kod
        try:
            for attempt in collision_retrying(max_attempts, TrackingCodeTaken):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        placement.tracking_number = self.tracking.next_code()

                    res = self.repo.create_order(
                        {
                            "user_id": placement.identity.id,
                            "status": "Confirmed" if request.payment_status == "success" else "Pending",
                            "total_amount": placement.quote.total,
                            "shipping_address": request.address.model_dump(by_alias=True),
                            "payment_status": request.payment_status,
                            "order_date": placement.delivery_date,
                            "tracking_number": placement.tracking_number,
                            "shipping_method": request.shipping_method,
                        }
                    )
                    if not res.ok and res.error.code == CONFLICT:
                        logger.warning(f"Tracking code {placement.tracking_number} taken on insert, regenerating")
                        raise TrackingCodeTaken(placement.tracking_number)
        except RetryError:
            logger.error(f"Order insert kept colliding on tracking code after {max_attempts} attempts")
            raise TrackingCodeExhausted()

        if not res.ok:
            raise OrderInsertFailed(res.error.message)
        placement.order = res.data

    def _insert_items(self, placement: Placement) -> None:
        #snapshot ceny z koszyka, nie aktualna cena produktu
        rows = [
            {
                "order_id": placement.order.id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "price_each": line.amount,
            }
            for line in placement.lines
        ]
        res = self.repo.create_items(rows)
        if not res.ok:
            raise OrderItemsInsertFailed(res.error.message)

    def _insert_payment_log(self, placement: Placement) -> None:
        confirmation = placement.confirmation
        res = self.repo.create_payment_log(
            {
                "order_id": placement.order.id,
                "transaction_id": confirmation.transaction_id,
                "charge_id": confirmation.charge_id,
                "status": confirmation.message,
                "amount": placement.charged_amount,
                "currency": CURRENCY,
                "response_data": confirmation.raw(),
            }
        )
        if not res.ok:
            raise PaymentLogInsertFailed(res.error.message)

    # kroki best-effort
    def _send_order_email(self, placement: Placement) -> None:
        self.email_service.send_order_email(
            placement.identity.name,
            placement.request.email,
            placement.lines,
            placement.request.address,
            placement.quote.total,
            placement.order.id,
            placement.delivery_date,
        )

    def _insert_notification(self, placement: Placement) -> None:
        res = self.notifications.create_notification(
            {
                "user_id": placement.identity.id,
                "order_id": placement.order.id,
                "message": f"Your order #{placement.order.id} has been placed successfully!",
                "read": False,
                "type": ORDER_PLACED,
            }
        )
        if not res.ok:
            raise SideEffectError(res.error.message)

    def _clear_cart(self, placement: Placement) -> None:
        self.cart_service.clear_all(placement.identity.id)
