#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel, ProductImageModel
from storefront.data.models.cart_line import CartLineModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment_log import PaymentLogModel
from storefront.data.models.notification import NotificationModel

__all__ = [
    "UserModel",
    "ProductModel",
    "ProductImageModel",
    "CartLineModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentLogModel",
    "NotificationModel",
]
