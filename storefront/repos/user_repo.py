from storefront.data.gateway import DataGateway, GatewayResult


class UserRepo:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def get_by_email(self, email: str) -> GatewayResult:
        return self.gateway.select("users", eq={"email": email}, single=True)

    def create_user(self, values: dict) -> GatewayResult:
        return self.gateway.insert("users", values)
