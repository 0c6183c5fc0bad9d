# storefront/services/catalog_service.py
from typing import List

from storefront.data.gateway import DataGateway
from storefront.domain.errors import NotFoundError, StorefrontError
from storefront.domain.schemas import ProductOut, ProductDetailOut
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Tylko odczyt katalogu: lista, szczegoly, wyszukiwanie."""

    def __init__(self, gateway: DataGateway):
        self.repo = ProductRepo(gateway)

    def list_products(self, brand: str | None = None, from_: int = 0, to: int = 20) -> List[ProductOut]:
        res = self.repo.list_active([brand] if brand else None, from_, to)
        if not res.ok:
            logger.error(f"Product listing failed: {res.error.message}")
            return []
        return [ProductOut.model_validate(p) for p in res.data]

    def search(self, query: str | None, from_: int = 0, to: int = 20) -> List[ProductOut]:
        if not query or not query.strip():
            return []

        res = self.repo.search_active(query.strip(), from_, to)
        if not res.ok:
            logger.error(f"Product search for '{query}' failed: {res.error.message}")
            return []
        return [ProductOut.model_validate(p) for p in res.data]

    def detail(self, product_id: int) -> ProductDetailOut:
        res = self.repo.get_with_images(product_id)

        if res.not_found:
            raise NotFoundError(f"Product {product_id} not found")
        if not res.ok:
            raise StorefrontError(res.error.message)

        return ProductDetailOut.model_validate(res.data)
