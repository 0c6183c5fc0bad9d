# storefront/utils/retry.py
from tenacity import Retrying, retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def collision_retrying(max_attempts: int, exc_type: type[Exception]) -> Retrying:
    """
    Ograniczona petla ponowien bez czekania - np. losowanie kodu sledzenia
    az trafimy na wolny. Po wyczerpaniu prob leci tenacity.RetryError.
    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_exception_type(exc_type),
    )
