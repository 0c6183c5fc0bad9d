# storefront/services/lock_service.py
import uuid

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#GET + porownanie + DEL jako jedna operacja w redisie, nikt nie zwolni cudzego locka


class LockService:
    """
    -krotki lock na pare (user, produkt) przy dodawaniu do koszyka
    -zwalnianie locka tylko przez wlasciciela tokena
    """

    def __init__(self, url: str | None = None, ttl: int = CART_LOCK_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(user_id: str, product_id: int) -> str:
        return f"cart:{user_id}:{product_id}:lock"

    @redis_retry()
    def acquire_cart_line_lock(self, user_id: str, product_id: int) -> str | None:
        key = self._key(user_id, product_id)
        token = uuid.uuid4().hex
        logger.info(f"Acquire lock {key}")
        #SET cart:u1:7:lock "<token>" NX EX 5
        acquired = self.redis.set(name=key, value=token, nx=True, ex=self.ttl)
        return token if acquired else None

    @redis_retry()
    def release_cart_line_lock(self, user_id: str, product_id: int, token: str) -> bool:
        key = self._key(user_id, product_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
