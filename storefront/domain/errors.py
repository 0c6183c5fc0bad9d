# storefront/domain/errors.py


class StorefrontError(Exception):
    """Bazowy blad domeny, `message` jest krotki i nadaje sie do pokazania uzytkownikowi."""

    code = "StorefrontError"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.code


class AuthError(StorefrontError):
    code = "AuthError"


class NotAuthenticated(AuthError):
    code = "NotAuthenticated"

    def default_message(self) -> str:
        return "User not logged in"


class ValidationError(StorefrontError):
    code = "ValidationError"


class EmptyCart(ValidationError):
    code = "EmptyCart"

    def default_message(self) -> str:
        return "Cart is empty"


class NotFoundError(StorefrontError):
    code = "NotFoundError"


class ConflictError(StorefrontError):
    code = "ConflictError"


class TrackingCodeExhausted(ConflictError):
    code = "TrackingCodeExhausted"

    def default_message(self) -> str:
        return "Could not generate a unique tracking code"


class CartChangedDuringCheckout(ConflictError):
    """Koszyk po platnosci nie zgadza sie z tym, za co klient zaplacil."""

    code = "CartChangedDuringCheckout"

    def default_message(self) -> str:
        return "Cart changed during checkout"


class RemoteWriteError(StorefrontError):
    """Zapis przez gateway sie nie udal; `step` mowi ktory wiersz."""

    code = "RemoteWriteError"
    step = "unknown"

    def __init__(self, message: str | None = None, step: str | None = None):
        if step is not None:
            self.step = step
        super().__init__(message)

    def default_message(self) -> str:
        return f"Failed to write {self.step}"


class OrderInsertFailed(RemoteWriteError):
    code = "OrderInsertFailed"
    step = "order"


class OrderItemsInsertFailed(RemoteWriteError):
    code = "OrderItemsInsertFailed"
    step = "order_items"


class PaymentLogInsertFailed(RemoteWriteError):
    code = "PaymentLogInsertFailed"
    step = "payment_log"


class PaymentDeclined(StorefrontError):
    code = "PaymentDeclined"

    def default_message(self) -> str:
        return "Payment failed"


class SideEffectError(StorefrontError):
    """Blad maila/powiadomienia - tylko logowany, nigdy nie zmienia wyniku zamowienia."""

    code = "SideEffectError"
