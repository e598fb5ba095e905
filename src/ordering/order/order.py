"""Order aggregate (CQRS) — the invoice recorded at checkout.

An Order is a snapshot of what was bought: billing contact, purchased items,
shipping fee and grand total, and how it was paid. Those are fixed when the
order is placed. Two independent state machines then run on it:

Order status (admin-driven; any status may be set from any other status):
    Processing, Packaged, Shipped, Out For Delivery, Delivered, Cancelled

Item return status (one per OrderItem):
    NotReturned → ReturnRequested → Returned | ReturnRejected

Optimistic concurrency rides on the aggregate's ``_version``, which Protean
advances on every save and checks again at commit.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.errors import InvalidTransitionError, ItemNotFoundError
from ordering.order.events import (
    ItemReturnRequested,
    ItemReturnResolved,
    OrderPlaced,
    OrderStatusChanged,
)


def _normalize(value) -> str:
    """Lower-case and strip separators so 'Out For Delivery' == 'OutForDelivery'."""
    return re.sub(r"[\s_\-]", "", str(value)).lower()


def _parse_choice(enum_cls, value, field_name, aliases=None):
    key = _normalize(value) if value is not None else ""
    if aliases and key in aliases:
        key = aliases[key]
    for member in enum_cls:
        if _normalize(member.value) == key:
            return member
    valid = ", ".join(m.value for m in enum_cls)
    raise ValidationError({field_name: [f"'{value}' is not valid. Expected one of: {valid}"]})


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PROCESSING = "Processing"
    PACKAGED = "Packaged"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "Out For Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        return _parse_choice(cls, value, "order_status")


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    CASH_ON_DELIVERY = "Cash On Delivery"

    @classmethod
    def parse(cls, value) -> "PaymentStatus":
        return _parse_choice(cls, value, "payment_status")


class PaymentMethod(Enum):
    GATEWAY = "gateway"
    CASH_ON_DELIVERY = "cod"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "PaymentMethod":
        return _parse_choice(
            cls,
            value,
            "payment_method",
            aliases={"razorpay": "gateway", "cashondelivery": "cod"},
        )


class ReturnStatus(Enum):
    NOT_RETURNED = "NotReturned"
    RETURN_REQUESTED = "ReturnRequested"
    RETURNED = "Returned"
    RETURN_REJECTED = "ReturnRejected"


# Item return state machine
_RETURN_TRANSITIONS = {
    ReturnStatus.NOT_RETURNED: {ReturnStatus.RETURN_REQUESTED},
    ReturnStatus.RETURN_REQUESTED: {ReturnStatus.RETURNED, ReturnStatus.RETURN_REJECTED},
    ReturnStatus.RETURNED: set(),  # Terminal
    ReturnStatus.RETURN_REJECTED: set(),  # Terminal
}

# Outcomes an administrator may choose when resolving a return request
RETURN_DECISIONS = (ReturnStatus.RETURNED, ReturnStatus.RETURN_REJECTED)


def parse_return_decision(value) -> ReturnStatus:
    """Parse an admin decision, accepting only Returned or ReturnRejected."""
    try:
        decision = ReturnStatus(value)
    except ValueError:
        decision = None
    if decision not in RETURN_DECISIONS:
        raise ValidationError(
            {"decision": [f"'{value}' is not a valid decision. Expected one of: Returned, ReturnRejected"]}
        )
    return decision


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class BillingData:
    """Recipient contact and address captured at checkout.

    The snapshot never changes after the order is placed, even if the
    customer later edits their profile. The email doubles as the ownership
    key for self-service operations.
    """

    first_name = String(max_length=100)
    last_name = String(max_length=100)
    company_name = String(max_length=255)
    country = String(max_length=100)
    address = String(max_length=255)
    address_two = String(max_length=255)
    town = String(max_length=100)
    phone = String(max_length=30)
    email = String(required=True, max_length=254)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A purchased line, snapshotted from the catalogue at checkout.

    Each item carries its own return lifecycle, independent of the order's
    fulfillment status.
    """

    product_id = String(max_length=255)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    discounted_price = Float(min_value=0.0)
    image_ref = String(max_length=500)
    return_status = String(
        choices=ReturnStatus,
        default=ReturnStatus.NOT_RETURNED.value,
    )
    return_reason = String(max_length=500)
    return_details = Text()
    return_requested_at = DateTime()
    return_resolved_at = DateTime()
    return_resolved_by = String(max_length=255)

    def _assert_can_move_to(self, target: ReturnStatus, message: str) -> None:
        current = ReturnStatus(self.return_status)
        if target not in _RETURN_TRANSITIONS[current]:
            raise InvalidTransitionError(message.format(current=current.value), current_status=current.value)

    def request_return(self, reason, details=None, requested_at=None):
        self._assert_can_move_to(
            ReturnStatus.RETURN_REQUESTED,
            "Item return status is already '{current}'",
        )
        self.return_status = ReturnStatus.RETURN_REQUESTED.value
        self.return_reason = reason
        self.return_details = details or ""
        self.return_requested_at = requested_at or datetime.now(UTC)

    def resolve_return(self, decision: ReturnStatus, resolved_by=None, resolved_at=None):
        self._assert_can_move_to(
            decision,
            "Cannot update return status from '{current}'. It must be 'ReturnRequested'",
        )
        self.return_status = decision.value
        self.return_resolved_by = resolved_by
        self.return_resolved_at = resolved_at or datetime.now(UTC)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    billing_data = ValueObject(BillingData, required=True)
    customer_email = String(required=True, max_length=254)
    items = HasMany(OrderItem)
    shipping_fee = Float(default=0.0, min_value=0.0)
    grand_total = Float(required=True, min_value=0.0)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, required=True)
    order_status = String(
        choices=OrderStatus,
        default=OrderStatus.PROCESSING.value,
    )
    gateway_order_id = String(max_length=255)
    gateway_payment_id = String(max_length=255)
    gateway_signature = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        billing_data,
        items_data,
        grand_total,
        payment_method,
        payment_status,
        shipping_fee=0.0,
        gateway_order_id=None,
        gateway_payment_id=None,
        gateway_signature=None,
    ):
        """Record a new order from checkout data.

        Order status always starts at Processing and every item starts at
        NotReturned with no return reason, whatever the caller sent.

        Args:
            billing_data: Dict of BillingData fields; ``email`` is required.
            items_data: Non-empty list of dicts with name, quantity, price and
                optionally product_id, discounted_price, image_ref.
            grand_total: Amount charged, stored as given.
        """
        if not billing_data:
            raise ValidationError({"billing_data": ["Billing data is required"]})
        if not items_data:
            raise ValidationError({"items": ["At least one item is required"]})
        if grand_total is None:
            raise ValidationError({"grand_total": ["Grand total is required"]})

        method = PaymentMethod.parse(payment_method)
        status = PaymentStatus.parse(payment_status)
        billing = BillingData(**billing_data)
        now = datetime.now(UTC)

        order = cls(
            billing_data=billing,
            customer_email=billing.email.strip().lower(),
            items=[
                OrderItem(
                    product_id=item.get("product_id"),
                    name=item.get("name"),
                    quantity=item.get("quantity"),
                    price=item.get("price"),
                    discounted_price=item.get("discounted_price"),
                    image_ref=item.get("image_ref"),
                )
                for item in items_data
            ],
            shipping_fee=shipping_fee or 0.0,
            grand_total=grand_total,
            payment_method=method.value,
            payment_status=status.value,
            order_status=OrderStatus.PROCESSING.value,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
            gateway_signature=gateway_signature,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_email=order.customer_email,
                item_count=len(order.items),
                shipping_fee=order.shipping_fee,
                grand_total=order.grand_total,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def item(self, item_id) -> OrderItem:
        found = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if found is None:
            raise ItemNotFoundError(str(self.id), str(item_id))
        return found

    def is_owned_by(self, email) -> bool:
        return bool(email) and email.strip().lower() == self.customer_email

    # -------------------------------------------------------------------
    # Order status
    # -------------------------------------------------------------------
    def change_status(self, target_status, changed_by=None):
        """Set the fulfillment status. Any valid status may follow any other."""
        target = target_status if isinstance(target_status, OrderStatus) else OrderStatus.parse(target_status)
        previous = self.order_status
        now = datetime.now(UTC)

        self.order_status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Returns
    # -------------------------------------------------------------------
    def request_item_return(self, item_id, reason, details=None):
        """Customer asks to return one item. Only allowed from NotReturned."""
        if not reason or not str(reason).strip():
            raise ValidationError({"reason": ["Return reason is required"]})

        item = self.item(item_id)
        now = datetime.now(UTC)
        item.request_return(reason=reason.strip(), details=details, requested_at=now)
        self.updated_at = now

        self.raise_(
            ItemReturnRequested(
                order_id=str(self.id),
                item_id=str(item.id),
                item_name=item.name,
                quantity=item.quantity,
                customer_email=self.customer_email,
                reason=item.return_reason,
                details=item.return_details,
                requested_at=now,
            )
        )
        return item

    def resolve_item_return(self, item_id, decision, resolved_by=None):
        """Admin accepts or rejects a pending return. Only allowed from ReturnRequested."""
        outcome = decision if isinstance(decision, ReturnStatus) else parse_return_decision(decision)
        if outcome not in RETURN_DECISIONS:
            raise ValidationError({"decision": [f"'{outcome.value}' is not a valid decision"]})

        item = self.item(item_id)
        now = datetime.now(UTC)
        item.resolve_return(outcome, resolved_by=resolved_by, resolved_at=now)
        self.updated_at = now

        self.raise_(
            ItemReturnResolved(
                order_id=str(self.id),
                item_id=str(item.id),
                decision=outcome.value,
                resolved_by=resolved_by,
                resolved_at=now,
            )
        )
        return item
