from datetime import datetime, timezone
from decimal import Decimal
from unittest import mock

import requests

from storefront.domain.schemas import Address, CartLineOut
from storefront.services.email_service import EmailService, send_order_email_task

PAYLOAD = {"orderId": 7, "userEmail": "jan@mail.com"}


@mock.patch("storefront.services.email_service.send_order_email_task")
def test_order_email_is_enqueued(task):
    line = CartLineOut(id=1, user_id="user-1", product_id=3, quantity=2, amount=Decimal("10.00"))
    address = Address(address_line1="Main St 1", zip_code="62704")

    EmailService.send_order_email(
        "Jan", "jan@mail.com", [line], address, Decimal("55.00"), 7,
        datetime(2026, 3, 3, tzinfo=timezone.utc),
    )

    payload = task.delay.call_args.args[0]
    assert payload["orderId"] == 7
    assert payload["cartTotal"] == 55.0
    assert payload["cartList"][0]["quantity"] == 2
    assert payload["address"]["zipCode"] == "62704"
    assert payload["orderDate"].startswith("2026-03-03")


@mock.patch("storefront.services.email_service.requests.post")
def test_task_posts_once_with_bearer(post):
    post.return_value = mock.Mock(ok=True, status_code=200)

    result = send_order_email_task(PAYLOAD)

    assert result["status"] == "sent"
    assert post.call_count == 1
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-key"


@mock.patch("storefront.services.email_service.requests.post")
def test_task_logs_non_2xx_without_raising(post):
    post.return_value = mock.Mock(ok=False, status_code=500)

    assert send_order_email_task(PAYLOAD)["status"] == "failed"


@mock.patch("storefront.services.email_service.requests.post")
def test_task_survives_transport_error(post):
    post.side_effect = requests.Timeout("slow")

    assert send_order_email_task(PAYLOAD)["status"] == "failed"
    assert post.call_count == 1
