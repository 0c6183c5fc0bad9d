from decimal import Decimal
from typing import Iterable, List

from redis.exceptions import RedisError

from storefront.data.gateway import DataGateway
from storefront.domain.errors import RemoteWriteError
from storefront.domain.schemas import ActionResult, CartLineOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.lock_service import LockService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

NOT_LOGGED_IN = "User not logged in"
ITEM_NOT_FOUND = "Item not found in cart"


def _ok(message: str) -> ActionResult:
    return ActionResult(success=True, message=message)


def _fail(message: str) -> ActionResult:
    return ActionResult(success=False, message=message)


class CartService:
    """
    Koszyk uzytkownika, jedna linia na pare (user, produkt)
    commands (add, adjust, remove) zwracaja ActionResult i nie rzucaja wyjatkow
    query (list) tylko odczyt
    cena linii to snapshot z momentu dodania, nie przeliczamy jej pozniej
    """

    def __init__(self, gateway: DataGateway, lock_service: LockService):
        self.repo = CartRepo(gateway)
        self.products = ProductRepo(gateway)
        self.lock_service = lock_service

    #query - odczyt
    def list_lines(self, user_id: str | None) -> List[CartLineOut]:
        if not user_id:
            return []

        res = self.repo.list_lines(user_id)
        if not res.ok:
            logger.error(f"Nie udalo sie pobrac koszyka {user_id}: {res.error.message}")
            return []

        return [CartLineOut.model_validate(line) for line in res.data]

    @staticmethod
    def subtotal(lines: Iterable[CartLineOut]) -> Decimal:
        return sum((line.amount * line.quantity for line in lines), Decimal("0.00"))

    #commands
    def add(self, user_id: str | None, product_id: int) -> ActionResult:
        if not user_id:
            return _fail(NOT_LOGGED_IN)

        # select-then-write pod lockiem, zeby dwa rownolegle add nie zrobily dwoch linii
        try:
            token = self.lock_service.acquire_cart_line_lock(user_id, product_id)
        except RedisError as e:
            logger.error(f"Lock dla koszyka {user_id} niedostepny: {e}")
            return _fail("Cart is temporarily unavailable")

        if not token:
            return _fail("Cart is being updated, try again")

        try:
            return self._add_locked(user_id, product_id)
        finally:
            try:
                self.lock_service.release_cart_line_lock(user_id, product_id, token)
            except RedisError as e:
                # lock i tak wygasnie po TTL
                logger.warning(f"Failed to release cart lock for product {product_id}: {e}")

    def _add_locked(self, user_id: str, product_id: int) -> ActionResult:
        existing = self.repo.get_line(user_id, product_id)

        if not existing.ok and not existing.not_found:
            return _fail(existing.error.message)

        if existing.ok:
            line = existing.data
            logger.info(
                f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                f"z {line.quantity} do {line.quantity + 1}"
            )
            updated = self.repo.set_quantity(line.id, line.quantity + 1)
            if not updated.ok:
                return _fail(updated.error.message)
            return _ok("Cart quantity updated")

        product = self.products.get_product(product_id)
        if product.not_found:
            return _fail("Product not found")
        if not product.ok:
            return _fail(product.error.message)

        logger.info(f"Dodaje nowy produkt {product_id} do koszyka {user_id}")
        inserted = self.repo.add_line(user_id, product_id, product.data.amount)
        if not inserted.ok:
            return _fail(inserted.error.message)

        return _ok("Product added to cart")

    def adjust_quantity(self, user_id: str | None, product_id: int, delta: int) -> ActionResult:
        if not user_id:
            return _fail(NOT_LOGGED_IN)

        existing = self.repo.get_line(user_id, product_id)
        if existing.not_found:
            return _fail(ITEM_NOT_FOUND)
        if not existing.ok:
            return _fail(existing.error.message)

        new_quantity = existing.data.quantity + delta
        if new_quantity < 1:
            return _fail("Quantity cannot be less than 1")

        updated = self.repo.set_quantity(existing.data.id, new_quantity)
        if not updated.ok:
            return _fail(updated.error.message)

        return _ok("Cart updated")

    def remove(self, user_id: str | None, line_id: int) -> ActionResult:
        if not user_id:
            return _fail(NOT_LOGGED_IN)

        res = self.repo.delete_line(user_id, line_id)
        if not res.ok:
            return _fail(res.error.message)
        if res.data == 0:
            return _fail(ITEM_NOT_FOUND)

        logger.info(f"Usunieto linie {line_id} z koszyka {user_id}")
        return _ok("Item removed from cart")

    def clear_all(self, user_id: str) -> int:
        """Czyszczenie calego koszyka, tylko po zlozonym zamowieniu."""
        res = self.repo.delete_all(user_id)
        if not res.ok:
            raise RemoteWriteError(res.error.message, step="cart")

        logger.info(f"Koszyk {user_id} wyczyszczony, usunieto {res.data} linii")
        return res.data
