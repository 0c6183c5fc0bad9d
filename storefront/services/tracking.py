# storefront/services/tracking.py
import random
import string
from typing import Callable

from tenacity import RetryError

from storefront.domain.errors import TrackingCodeExhausted
from storefront.utils.retry import collision_retrying
from storefront.utils.settings import TRACKING_CODE_PREFIX, TRACKING_CODE_MAX_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


class TrackingCodeTaken(Exception):
    pass


def generate_tracking_code(rng: random.Random | None = None, prefix: str = TRACKING_CODE_PREFIX) -> str:
    rng = rng or random
    return prefix + "".join(rng.choice(ALPHABET) for _ in range(CODE_LENGTH))


class TrackingCodeGenerator:
    """
    Losuje kod sledzenia (ORD-XXXXXX) az trafi na wolny.
    Liczba prob ograniczona, po wyczerpaniu TrackingCodeExhausted.
    """

    def __init__(
        self,
        exists: Callable[[str], bool],
        max_attempts: int = TRACKING_CODE_MAX_ATTEMPTS,
        rng: random.Random | None = None,
        prefix: str = TRACKING_CODE_PREFIX,
    ):
        self.exists = exists
        self.max_attempts = max_attempts
        self.rng = rng
        self.prefix = prefix

    def next_code(self) -> str:
        try:
            for attempt in collision_retrying(self.max_attempts, TrackingCodeTaken):
                with attempt:
                    code = generate_tracking_code(self.rng, self.prefix)
                    if self.exists(code):
                        logger.warning(f"Tracking code {code} already taken, regenerating")
                        raise TrackingCodeTaken(code)
        except RetryError:
            logger.error(f"No free tracking code after {self.max_attempts} attempts")
            raise TrackingCodeExhausted()

        return code
