"""Domain events for the Order aggregate.

Events are immutable facts raised by the aggregate and dispatched when the
unit of work commits. Projectors use them to maintain read models such as
the pending-returns desk.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A new order (invoice) was recorded at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    shipping_fee = Float()
    grand_total = Float(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator set the fulfillment status of an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ItemReturnRequested:
    """A customer asked to return one item of a placed order."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    item_name = String(required=True)
    quantity = Integer()
    customer_email = String(required=True)
    reason = String(required=True)
    details = Text()
    requested_at = DateTime(required=True)


@ordering.event(part_of="Order")
class ItemReturnResolved:
    """An administrator accepted (Returned) or rejected (ReturnRejected) a return request."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    decision = String(required=True)
    resolved_by = String()
    resolved_at = DateTime(required=True)
