"""Repository for the Order aggregate.

Saves go through Protean's own ``add``, which advances the aggregate's
``_version`` and refuses stale writes at commit with ``ExpectedVersionError``.
"""

import uuid

from protean.exceptions import ValidationError

from ordering.domain import ordering
from ordering.order.order import Order


def parse_order_id(order_id) -> str:
    """Return the canonical string form of an order id, or raise ValidationError."""
    try:
        return str(uuid.UUID(str(order_id)))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError({"order_id": [f"'{order_id}' is not a valid order id"]}) from None


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_all(self, limit: int = 100, offset: int = 0) -> list[Order]:
        """All orders, newest first."""
        return self._dao.query.order_by("-created_at").limit(limit).offset(offset).all().items

    def find_by_customer_email(self, email: str, limit: int = 100, offset: int = 0) -> list[Order]:
        """Orders whose billing email matches, newest first."""
        return (
            self._dao.query.filter(customer_email=email.strip().lower())
            .order_by("-created_at")
            .limit(limit)
            .offset(offset)
            .all()
            .items
        )

    def count_matching(self, **filters) -> int:
        query = self._dao.query.filter(**filters) if filters else self._dao.query
        return query.all().total
