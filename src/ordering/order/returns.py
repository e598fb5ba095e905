"""Item returns — commands and handler.

A customer asks to return a single item of their own order; an administrator
then accepts (Returned) or rejects (ReturnRejected) the request. Both steps
are single guarded writes, so two concurrent resolutions of the same item
cannot both succeed.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, parse_return_decision
from ordering.order.policy import load_order, require_admin, require_owner, require_revision
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class RequestItemReturn:
    """Ask to return one item, giving a reason."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    reason = String(max_length=500)
    details = Text()
    actor_email = String(max_length=254)
    expected_revision = Integer()


@ordering.command(part_of="Order")
class ResolveItemReturn:
    """Accept or reject a pending return request."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    decision = String(required=True, max_length=50)
    actor_email = String(max_length=254)
    actor_role = String(max_length=50)
    expected_revision = Integer()


@ordering.command_handler(part_of=Order)
class ItemReturnsHandler:
    @handle(RequestItemReturn)
    def request_item_return(self, command):
        order = load_order(command.order_id)
        require_owner(order, command.actor_email, "request a return")
        require_revision(order, command.expected_revision)

        item = order.request_item_return(
            item_id=command.item_id,
            reason=command.reason,
            details=command.details,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Item return requested",
            order_id=str(order.id),
            item_id=str(item.id),
            reason=item.return_reason,
        )
        return order

    @handle(ResolveItemReturn)
    def resolve_item_return(self, command):
        decision = parse_return_decision(command.decision)
        require_admin(command.actor_email, command.actor_role, "resolve a return")

        order = load_order(command.order_id)
        require_revision(order, command.expected_revision)

        item = order.resolve_item_return(
            item_id=command.item_id,
            decision=decision,
            resolved_by=command.actor_email,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Item return resolved",
            order_id=str(order.id),
            item_id=str(item.id),
            decision=item.return_status,
            resolved_by=command.actor_email,
        )
        return order
