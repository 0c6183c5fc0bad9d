# storefront/repos/cart_repo.py
from decimal import Decimal

from storefront.data.gateway import DataGateway, GatewayResult


class CartRepo:
    def __init__(self, gateway: DataGateway):
        self.gateway = gateway

    def list_lines(self, user_id: str) -> GatewayResult:
        #najnowsze na gorze
        return self.gateway.select(
            "cart",
            eq={"user_id": user_id},
            order_by="id",
            ascending=False,
            embed=("product",),
        )

    def get_line(self, user_id: str, product_id: int) -> GatewayResult:
        return self.gateway.select(
            "cart",
            eq={"user_id": user_id, "product_id": product_id},
            single=True,
        )

    def add_line(self, user_id: str, product_id: int, amount: Decimal) -> GatewayResult:
        return self.gateway.insert(
            "cart",
            {
                "user_id": user_id,
                "product_id": product_id,
                "amount": amount,
                "quantity": 1,
            },
        )

    def set_quantity(self, line_id: int, quantity: int) -> GatewayResult:
        return self.gateway.update("cart", line_id, {"quantity": quantity})

    def delete_line(self, user_id: str, line_id: int) -> GatewayResult:
        #zawsze po (id, user_id), inaczej mozna usunac cudza linie
        return self.gateway.delete("cart", eq={"id": line_id, "user_id": user_id})

    def delete_all(self, user_id: str) -> GatewayResult:
        return self.gateway.delete("cart", eq={"user_id": user_id})
