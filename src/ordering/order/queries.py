"""Read side of the order service.

Listings and single-order fetches go straight to the repository; the pending
returns desk reads the ``ReturnRequest`` projection. Store failures surface
as ``StorageError``.
"""

from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.order.dispatch import storage_guard
from ordering.order.errors import UnauthenticatedError
from ordering.order.order import Order
from ordering.order.policy import load_order, require_admin, require_owner_or_admin
from ordering.projections.return_requests import ReturnRequest


def _page(limit, offset):
    return (limit or get_settings().default_page_size), (offset or 0)


def list_orders(actor_email, actor_role, limit=None, offset=None):
    """All orders, newest first. Admin only. Returns ``(orders, total)``."""
    require_admin(actor_email, actor_role, "list all orders")
    limit, offset = _page(limit, offset)
    repo = current_domain.repository_for(Order)
    with storage_guard(query="list_orders"):
        return repo.find_all(limit=limit, offset=offset), repo.count_matching()


def list_customer_orders(actor_email, limit=None, offset=None):
    """Orders billed to the caller's verified email, newest first."""
    if not actor_email:
        raise UnauthenticatedError("An authenticated customer email is required")
    limit, offset = _page(limit, offset)
    email = actor_email.strip().lower()
    repo = current_domain.repository_for(Order)
    with storage_guard(query="list_customer_orders"):
        return (
            repo.find_by_customer_email(email, limit=limit, offset=offset),
            repo.count_matching(customer_email=email),
        )


def get_order(order_id, actor_email, actor_role) -> Order:
    with storage_guard(query="get_order", order_id=order_id):
        order = load_order(order_id)
    require_owner_or_admin(order, actor_email, actor_role, "view this order")
    return order


def pending_returns(actor_email, actor_role, limit=None, offset=None) -> list[ReturnRequest]:
    """Items awaiting a return decision, oldest request first. Admin only."""
    require_admin(actor_email, actor_role, "view pending returns")
    limit, offset = _page(limit, offset)
    repo = current_domain.repository_for(ReturnRequest)
    with storage_guard(query="pending_returns"):
        return repo._dao.query.order_by("requested_at").limit(limit).offset(offset).all().items
