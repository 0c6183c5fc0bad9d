# storefront/services/auth_events.py
from dataclasses import dataclass
from typing import Callable, Union

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignedIn:
    credential: str


@dataclass(frozen=True)
class SignedOut:
    pass


AuthEvent = Union[SignedIn, SignedOut]
AuthHandler = Callable[[AuthEvent], None]


class Subscription:
    def __init__(self, bus: "AuthEventBus", handler: AuthHandler):
        self._bus = bus
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._handlers.remove(self._handler)
            self.active = False


class AuthEventBus:
    """Zdarzenia sesji od dostawcy auth (zalogowanie / wylogowanie)."""

    def __init__(self):
        self._handlers: list[AuthHandler] = []

    def subscribe(self, handler: AuthHandler) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self, handler)

    def publish(self, event: AuthEvent) -> None:
        logger.info(f"Auth event {type(event).__name__}")
        for handler in list(self._handlers):
            handler(event)
