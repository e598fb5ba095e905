"""Order status changes — command and handler (admin only)."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.order.policy import load_order, require_admin, require_revision
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    order_status = String(required=True, max_length=50)
    actor_email = String(max_length=254)
    actor_role = String(max_length=50)
    expected_revision = Integer()


@ordering.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        target = OrderStatus.parse(command.order_status)
        require_admin(command.actor_email, command.actor_role, "change order status")

        order = load_order(command.order_id)
        require_revision(order, command.expected_revision)

        previous = order.order_status
        order.change_status(target, changed_by=command.actor_email)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.order_status,
            changed_by=command.actor_email,
        )
        return order
