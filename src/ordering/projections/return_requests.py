"""Return requests projection — the admin desk of items awaiting a decision.

Items are inserted when a customer requests a return and removed once an
administrator accepts or rejects it.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import ItemReturnRequested, ItemReturnResolved
from ordering.order.order import Order


@ordering.projection
class ReturnRequest:
    item_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    item_name = String(max_length=255)
    quantity = Integer(default=1)
    customer_email = String(required=True, max_length=254)
    reason = String(max_length=500)
    details = Text()
    requested_at = DateTime()


@ordering.projector(projector_for=ReturnRequest, aggregates=[Order])
class ReturnRequestProjector:
    @on(ItemReturnRequested)
    def on_item_return_requested(self, event):
        current_domain.repository_for(ReturnRequest).add(
            ReturnRequest(
                item_id=event.item_id,
                order_id=event.order_id,
                item_name=event.item_name,
                quantity=event.quantity,
                customer_email=event.customer_email,
                reason=event.reason,
                details=event.details,
                requested_at=event.requested_at,
            )
        )

    @on(ItemReturnResolved)
    def on_item_return_resolved(self, event):
        repo = current_domain.repository_for(ReturnRequest)
        try:
            record = repo.get(str(event.item_id))
            repo._dao.delete(record)
        except ObjectNotFoundError:
            pass
