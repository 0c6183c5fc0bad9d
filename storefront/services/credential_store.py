# storefront/services/credential_store.py
import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CREDENTIAL_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """
    Trwaly stan lokalny klienta: jeden token pod znanym kluczem (accessToken),
    osobno dla kazdego urzadzenia.
    """

    def __init__(self, device_id: str, url: str | None = None, key: str = CREDENTIAL_KEY):
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.key = f"{key}:{device_id}"

    @redis_retry()
    def get(self) -> str | None:
        return self.redis.get(self.key)

    @redis_retry()
    def set(self, credential: str) -> None:
        self.redis.set(self.key, credential)

    @redis_retry()
    def remove(self) -> None:
        logger.info(f"Removing persisted credential {self.key}")
        self.redis.delete(self.key)
