"""Entry point for order commands and queries from the outside world.

A command whose save loses the ``_version`` check at commit is not re-run
(see ``server.version_retry`` in ``domain.toml``); the conflict is raised as
``ConflictError``. Order store failures, whether on read or at commit, are
raised as ``StorageError``.
"""

from contextlib import contextmanager

from protean.exceptions import ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import OperationalError

from ordering.order.errors import ConflictError, StorageError
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def storage_guard(**context):
    """Re-raise order store failures inside the block as ``StorageError``."""
    try:
        yield
    except (OperationalError, TransactionError) as exc:
        logger.error("Order store unavailable", error=str(exc), **context)
        raise StorageError("Order store unavailable, please retry") from exc


def dispatch(command):
    """Process ``command`` synchronously and return what its handler returns."""
    name = command.__class__.__name__
    try:
        with storage_guard(command=name):
            return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        order_id = getattr(command, "order_id", None)
        logger.warning("Concurrent order modification rejected", command=name, order_id=order_id, error=str(exc))
        raise ConflictError(order_id) from exc
