from storefront.data.gateway import DataGateway, GatewayResult


class NotificationRepo:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def list_for_user(self, user_id: str, start: int, end: int) -> GatewayResult:
        return self.gateway.select(
            "notifications",
            eq={"user_id": user_id},
            order_by="id",
            ascending=False,
            range_=(start, end),
        )

    def create_notification(self, values: dict) -> GatewayResult:
        return self.gateway.insert("notifications", values)
