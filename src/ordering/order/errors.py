"""Errors raised by the order service that have no Protean counterpart.

Input problems are reported with ``protean.exceptions.ValidationError`` and
missing orders with ``protean.exceptions.ObjectNotFoundError``, the same way
the rest of the domain does. The classes below cover the remaining outcomes
of the order and return workflows; ``ordering.api.errors`` maps each one to
an HTTP status.
"""


class OrderingError(Exception):
    """Base class for ordering errors that carry a caller-visible message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ItemNotFoundError(OrderingError):
    """The order exists but has no item with the requested id."""

    def __init__(self, order_id: str, item_id: str) -> None:
        super().__init__(f"Item {item_id} not found in order {order_id}")
        self.order_id = order_id
        self.item_id = item_id


class InvalidTransitionError(OrderingError):
    """A state-machine precondition failed; ``current_status`` is the blocking state."""

    def __init__(self, message: str, current_status: str) -> None:
        super().__init__(message)
        self.current_status = current_status


class ForbiddenError(OrderingError):
    pass


class UnauthenticatedError(OrderingError):
    pass


class ConflictError(OrderingError):
    """A guarded write lost against a concurrent writer. Safe to retry after re-reading."""

    def __init__(
        self, order_id: str | None, expected_revision: int | None = None, actual_revision: int | None = None
    ) -> None:
        message = f"Order {order_id} was modified concurrently" if order_id else "Order was modified concurrently"
        if expected_revision is not None:
            message += f" (expected revision {expected_revision}, found {actual_revision})"
        super().__init__(message)
        self.order_id = order_id
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision


class StorageError(OrderingError):
    """The persistence layer failed. Safe to retry."""
