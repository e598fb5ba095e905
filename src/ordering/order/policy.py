"""Authorization rules shared by every order command and query.

Handlers receive the caller as plain command fields (``actor_email`` and
``actor_role``) so commands stay serializable; these helpers turn them into
allow/deny decisions.
"""

from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.order.errors import ConflictError, ForbiddenError
from ordering.order.order import Order
from ordering.order.repository import parse_order_id
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


def is_admin(role) -> bool:
    return bool(role) and role == get_settings().admin_role


def require_admin(actor_email, actor_role, action: str) -> None:
    if not is_admin(actor_role):
        logger.warning("Admin action refused", action=action, actor_email=actor_email, actor_role=actor_role)
        raise ForbiddenError(f"Administrator role required to {action}")


def require_owner(order: Order, actor_email, action: str) -> None:
    """Only the customer named on the invoice may act on it. Admins included."""
    if not order.is_owned_by(actor_email):
        logger.warning("Owner action refused", action=action, order_id=str(order.id), actor_email=actor_email)
        raise ForbiddenError(f"Only the customer who placed the order may {action}")


def require_owner_or_admin(order: Order, actor_email, actor_role, action: str) -> None:
    if is_admin(actor_role) or order.is_owned_by(actor_email):
        return
    logger.warning("Order access refused", action=action, order_id=str(order.id), actor_email=actor_email)
    raise ForbiddenError(f"Not allowed to {action}")


def require_revision(order: Order, expected_revision) -> None:
    """Refuse the command when the caller last saw a different ``_version`` of the order."""
    if expected_revision is not None and expected_revision != order._version:
        logger.warning(
            "Stale order revision",
            order_id=str(order.id),
            expected_revision=expected_revision,
            actual_revision=order._version,
        )
        raise ConflictError(str(order.id), expected_revision, order._version)


def load_order(order_id) -> Order:
    """Fetch an order by id. Malformed ids are a ValidationError, unknown ids ObjectNotFoundError."""
    return current_domain.repository_for(Order).get(parse_order_id(order_id))
