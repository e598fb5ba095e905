"""Order placement — command and handler.

Checkout may be completed by guests, so placing an order does not require an
authenticated caller. When the payment gateway reports a successful payment
and a signing secret is configured, the gateway signature is verified before
the order is recorded.
"""

import hashlib
import hmac
import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text
from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.domain import ordering
from ordering.order.order import Order, PaymentMethod, PaymentStatus
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    billing_data = Text(required=True)  # JSON: BillingData dict
    items = Text(required=True)  # JSON: list of item dicts
    shipping_fee = Float(default=0.0)
    grand_total = Float(required=True)
    payment_method = String(required=True, max_length=50)
    payment_status = String(required=True, max_length=50)
    gateway_order_id = String(max_length=255)
    gateway_payment_id = String(max_length=255)
    gateway_signature = String(max_length=255)


def expected_gateway_signature(secret: str, gateway_order_id, gateway_payment_id) -> str:
    message = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def verify_gateway_signature(command) -> None:
    secret = get_settings().gateway_secret
    if not secret:
        return
    if PaymentMethod.parse(command.payment_method) is not PaymentMethod.GATEWAY:
        return
    if PaymentStatus.parse(command.payment_status) is not PaymentStatus.PAID:
        return

    if not (command.gateway_order_id and command.gateway_payment_id and command.gateway_signature):
        raise ValidationError({"gateway_signature": ["Gateway order id, payment id and signature are required"]})

    expected = expected_gateway_signature(secret, command.gateway_order_id, command.gateway_payment_id)
    if not hmac.compare_digest(expected, command.gateway_signature):
        logger.warning("Gateway signature mismatch", gateway_order_id=command.gateway_order_id)
        raise ValidationError({"gateway_signature": ["Payment signature verification failed"]})


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        billing_data = json.loads(command.billing_data) if isinstance(command.billing_data, str) else command.billing_data
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items

        verify_gateway_signature(command)

        order = Order.place(
            billing_data=billing_data,
            items_data=items_data,
            grand_total=command.grand_total,
            payment_method=command.payment_method,
            payment_status=command.payment_status,
            shipping_fee=command.shipping_fee,
            gateway_order_id=command.gateway_order_id,
            gateway_payment_id=command.gateway_payment_id,
            gateway_signature=command.gateway_signature,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_email=order.customer_email,
            item_count=len(order.items),
            grand_total=order.grand_total,
            payment_method=order.payment_method,
        )
        return order
