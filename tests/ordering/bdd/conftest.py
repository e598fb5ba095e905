"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.order.errors import ForbiddenError, InvalidTransitionError
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.returns import RequestItemReturn, ResolveItemReturn
from ordering.order.status import ChangeOrderStatus
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

ADMIN_EMAIL = "ops@example.com"


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


def _capture(error, fn, *args, **kwargs):
    try:
        error["exc"] = None
        return fn(*args, **kwargs)
    except (ValidationError, InvalidTransitionError, ForbiddenError) as exc:
        error["exc"] = exc
        return None


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _place(email, item_names):
    items = [{"name": name, "quantity": 1, "price": 10.0} for name in item_names]
    return _process(
        PlaceOrder(
            billing_data=json.dumps({"first_name": "Test", "email": email}),
            items=json.dumps(items),
            grand_total=10.0 * len(items),
            payment_method="cod",
            payment_status="Cash On Delivery",
        )
    )


def _stored(order):
    return current_domain.repository_for(Order).get(order.id)


def _item_named(order, name):
    return next(item for item in _stored(order).items if item.name == name)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an order for "{first}" and "{second}" placed by "{email}"'),
    target_fixture="order",
)
def order_placed_by(first, second, email):
    return _place(email, [first, second])


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('an administrator sets the order status to "{status}"'))
def admin_sets_status(order, status, error):
    _capture(
        error,
        _process,
        ChangeOrderStatus(order_id=str(order.id), order_status=status, actor_email=ADMIN_EMAIL, actor_role="admin"),
    )


@when(parsers.cfparse('"{email}" sets the order status to "{status}"'))
def customer_sets_status(order, email, status, error):
    _capture(
        error,
        _process,
        ChangeOrderStatus(order_id=str(order.id), order_status=status, actor_email=email, actor_role="customer"),
    )


@when(parsers.cfparse('"{email}" requests a return of "{name}" because "{reason}"'))
def request_return(order, email, name, reason, error):
    item = _item_named(order, name)
    _capture(
        error,
        _process,
        RequestItemReturn(order_id=str(order.id), item_id=str(item.id), reason=reason, actor_email=email),
    )


@when(parsers.cfparse('an administrator resolves the return of "{name}" as "{decision}"'))
def resolve_return(order, name, decision, error):
    item = _item_named(order, name)
    _capture(
        error,
        _process,
        ResolveItemReturn(
            order_id=str(order.id),
            item_id=str(item.id),
            decision=decision,
            actor_email=ADMIN_EMAIL,
            actor_role="admin",
        ),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert _stored(order).order_status == status


@then(parsers.cfparse('every item has return status "{status}"'))
def every_item_has_status(order, status):
    assert all(item.return_status == status for item in _stored(order).items)


@then(parsers.cfparse('"{name}" has return status "{status}"'))
def item_has_status(order, name, status):
    assert _item_named(order, name).return_status == status


@then(parsers.cfparse('"{name}" has return reason "{reason}"'))
def item_has_reason(order, name, reason):
    assert _item_named(order, name).return_reason == reason


@then(parsers.cfparse('the request fails with an invalid transition from "{status}"'))
def fails_with_invalid_transition(error, status):
    assert isinstance(error["exc"], InvalidTransitionError)
    assert error["exc"].current_status == status


@then("the request fails with a validation error")
def fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError)


@then("the request is forbidden")
def request_is_forbidden(error):
    assert isinstance(error["exc"], ForbiddenError)
