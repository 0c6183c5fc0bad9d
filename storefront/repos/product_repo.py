# storefront/repos/product_repo.py
from storefront.data.gateway import DataGateway, GatewayResult

SEARCH_COLUMNS = ("name", "brand", "type", "description")


class ProductRepo:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def list_active(self, brands: list[str] | None, start: int, end: int) -> GatewayResult:
        return self.gateway.select(
            "products",
            eq={"is_active": True},
            in_={"brand": brands} if brands else None,
            order_by="id",
            range_=(start, end),
        )

    def search_active(self, query: str, start: int, end: int) -> GatewayResult:
        return self.gateway.select(
            "products",
            eq={"is_active": True},
            ilike_any=(query, SEARCH_COLUMNS),
            order_by="id",
            range_=(start, end),
        )

    def get_with_images(self, product_id: int) -> GatewayResult:
        return self.gateway.select(
            "products",
            eq={"id": product_id},
            embed=("product_images",),
            single=True,
        )

    def get_product(self, product_id: int) -> GatewayResult:
        return self.gateway.select("products", eq={"id": product_id}, single=True)
