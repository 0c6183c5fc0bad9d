# storefront/services/identity_service.py
import jwt
from redis.exceptions import RedisError

from storefront.data.gateway import DataGateway
from storefront.domain.schemas import UserRead
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_events import AuthEventBus, AuthEvent, SignedIn, SignedOut, Subscription
from storefront.services.credential_store import CredentialStore
from storefront.utils.settings import JWT_SECRET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class IdentityContext:
    """Aktualnie zalogowany uzytkownik, przekazywany jawnie do serwisow."""

    def __init__(self, current: UserRead | None = None):
        self.current = current

    @property
    def user_id(self) -> str | None:
        return self.current.id if self.current else None


class IdentityResolver:
    """
    Token -> uzytkownik.
    -dekoduje token (PyJWT), przy bledzie zwraca None i czysci zapisany token
    -szuka usera po emailu, jak go nie ma to tworzy z danych z tokena
    Bez store (klient nie podal urzadzenia) nic nie jest zapisywane.
    Awaria Redisa nie blokuje rozpoznania uzytkownika.
    """

    def __init__(
        self,
        gateway: DataGateway,
        store: CredentialStore | None,
        secret: str | None = JWT_SECRET,
    ):
        self.repo = UserRepo(gateway)
        self.store = store
        self.secret = secret

    def decode(self, credential: str) -> dict | None:
        try:
            if self.secret:
                return jwt.decode(
                    credential,
                    self.secret,
                    algorithms=["HS256"],
                    options={"verify_aud": False},
                )
            # bez sekretu tylko odczyt payloadu
            return jwt.decode(credential, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            logger.warning(f"Token verification failed: {e}")
            return None

    # =====================================================
    # STORE (Redis) - bledy tylko logujemy
    # =====================================================
    def _stored(self) -> str | None:
        if self.store is None:
            return None
        try:
            return self.store.get()
        except RedisError as e:
            logger.warning(f"Credential store unavailable, cannot read credential: {e}")
            return None

    def _persist(self, credential: str) -> None:
        if self.store is None:
            return
        try:
            self.store.set(credential)
        except RedisError as e:
            logger.warning(f"Credential store unavailable, credential not persisted: {e}")

    def _forget(self) -> None:
        if self.store is None:
            return
        try:
            self.store.remove()
        except RedisError as e:
            logger.warning(f"Credential store unavailable, credential not removed: {e}")

    def resolve(self, credential: str | None) -> UserRead | None:
        if not credential:
            self._forget()
            return None

        claims = self.decode(credential)
        if not claims or not claims.get("email") or not claims.get("sub"):
            self._forget()
            return None

        #zapis tokena zanim pojdzie zapytanie do bazy
        self._persist(credential)

        existing = self.repo.get_by_email(claims["email"])
        if existing.ok:
            return UserRead.model_validate(existing.data)

        if not existing.not_found:
            logger.error(f"User lookup for {claims['email']} failed: {existing.error.message}")
            return None

        metadata = claims.get("user_metadata") or {}
        created = self.repo.create_user(
            {
                "id": claims["sub"],
                "email": claims["email"],
                "name": metadata.get("full_name") or "",
                "profile": metadata.get("avatar_url") or "",
            }
        )
        if not created.ok:
            logger.error(f"User provisioning for {claims['email']} failed: {created.error.message}")
            return None

        logger.info(f"Provisioned user {claims['sub']} for {claims['email']}")
        return UserRead.model_validate(created.data)

    def restore(self, context: IdentityContext) -> UserRead | None:
        """Start aplikacji - odtworzenie sesji z zapisanego tokena."""
        context.current = self.resolve(self._stored())
        return context.current

    def handle_event(self, context: IdentityContext, event: AuthEvent) -> None:
        if isinstance(event, SignedIn):
            context.current = self.resolve(event.credential)
        elif isinstance(event, SignedOut):
            self._forget()
            context.current = None

    def bind(self, context: IdentityContext, bus: AuthEventBus) -> Subscription:
        return bus.subscribe(lambda event: self.handle_event(context, event))


class AuthSession:
    """
    Sesja jednego klienta: kontekst + wlasna szyna zdarzen.
    Resolver podpiety raz, zdarzenia nie wyciekaja do innych klientow.
    """

    def __init__(self, resolver: IdentityResolver, context: IdentityContext | None = None):
        self.resolver = resolver
        self.context = context or IdentityContext()
        self.bus = AuthEventBus()
        self._subscription = resolver.bind(self.context, self.bus)

    def sign_in(self, credential: str) -> UserRead | None:
        self.bus.publish(SignedIn(credential=credential))
        return self.context.current

    def sign_out(self) -> None:
        self.bus.publish(SignedOut())

    def restore(self) -> UserRead | None:
        return self.resolver.restore(self.context)

    def close(self) -> None:
        self._subscription.unsubscribe()
