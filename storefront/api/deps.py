# storefront/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.gateway import DataGateway
from storefront.domain.schemas import UserRead
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.credential_store import CredentialStore
from storefront.services.email_service import EmailService
from storefront.services.identity_service import AuthSession, IdentityResolver
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationReader
from storefront.services.order_service import OrderOrchestrator
from storefront.services.payment_bridge import PaymentBridge


def get_gateway(db: Session = Depends(get_db)) -> DataGateway:
    return DataGateway(db)


def get_credential_store(x_device_id: str | None = Header(None)) -> CredentialStore | None:
    # bez id urzadzenia token nie jest nigdzie zapisywany
    if not x_device_id or not x_device_id.strip():
        return None
    return CredentialStore(device_id=x_device_id.strip())


def get_lock_service() -> LockService:
    return LockService()


def get_email_service() -> EmailService:
    return EmailService()


def get_resolver(
    gateway: DataGateway = Depends(get_gateway),
    store: CredentialStore | None = Depends(get_credential_store),
) -> IdentityResolver:
    return IdentityResolver(gateway, store)


def get_auth_session(resolver: IdentityResolver = Depends(get_resolver)):
    session = AuthSession(resolver)
    try:
        yield session
    finally:
        session.close()


def get_identity(
    authorization: str | None = Header(None),
    resolver: IdentityResolver = Depends(get_resolver),
) -> UserRead | None:
    credential = None
    if authorization and authorization.lower().startswith("bearer "):
        credential = authorization[len("bearer "):].strip()
    return resolver.resolve(credential)


def require_identity(identity: UserRead | None = Depends(get_identity)) -> UserRead:
    if identity is None:
        raise HTTPException(status_code=401, detail="User not logged in")
    return identity


def get_cart_service(
    gateway: DataGateway = Depends(get_gateway),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(gateway, lock_service)


def get_catalog_service(gateway: DataGateway = Depends(get_gateway)) -> CatalogService:
    return CatalogService(gateway)


def get_notification_reader(gateway: DataGateway = Depends(get_gateway)) -> NotificationReader:
    return NotificationReader(gateway)


def get_orchestrator(
    gateway: DataGateway = Depends(get_gateway),
    cart_service: CartService = Depends(get_cart_service),
    email_service: EmailService = Depends(get_email_service),
) -> OrderOrchestrator:
    return OrderOrchestrator(gateway, cart_service, email_service)


def get_payment_bridge(orchestrator: OrderOrchestrator = Depends(get_orchestrator)) -> PaymentBridge:
    return PaymentBridge(orchestrator)
