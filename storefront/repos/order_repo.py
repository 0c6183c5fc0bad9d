# storefront/repos/order_repo.py
from storefront.data.gateway import DataGateway, GatewayResult


class OrderRepo:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def tracking_number_exists(self, tracking_number: str) -> GatewayResult:
        res = self.gateway.select(
            "orders",
            eq={"tracking_number": tracking_number},
            order_by=None,
            limit=1,
        )
        if not res.ok:
            return res
        return GatewayResult(data=bool(res.data))

    def create_order(self, values: dict) -> GatewayResult:
        return self.gateway.insert("orders", values)

    def create_items(self, rows: list[dict]) -> GatewayResult:
        return self.gateway.insert("order_items", rows)

    def create_payment_log(self, values: dict) -> GatewayResult:
        return self.gateway.insert("payment_logs", values)

    def get_order(self, order_id: int) -> GatewayResult:
        return self.gateway.select("orders", eq={"id": order_id}, embed=("items",), single=True)

    def orders_without_items(self) -> GatewayResult:
        return self.gateway.select_without_children("orders", "order_items", "order_id")
