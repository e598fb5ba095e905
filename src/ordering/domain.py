"""Ordering bounded context — Orders (invoices) and per-item Returns.

Handles order placement at checkout, admin-driven fulfillment status changes,
and the customer-initiated, admin-resolved return workflow for order items.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
