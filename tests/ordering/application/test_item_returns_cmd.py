"""Application tests for the item return workflow."""

import json

import pytest
from ordering.order.errors import ForbiddenError, InvalidTransitionError, ItemNotFoundError
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.returns import RequestItemReturn, ResolveItemReturn
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _place_order(email="asha@example.com"):
    return current_domain.process(
        PlaceOrder(
            billing_data=json.dumps({"first_name": "Asha", "email": email}),
            items=json.dumps(
                [
                    {"name": "Desk Lamp", "quantity": 1, "price": 40.0},
                    {"name": "Notebook", "quantity": 2, "price": 5.0},
                ]
            ),
            grand_total=50.0,
            payment_method="cod",
            payment_status="Cash On Delivery",
        ),
        asynchronous=False,
    )


def _request(order_id, item_id, reason="damaged", actor_email="asha@example.com", **kwargs):
    return current_domain.process(
        RequestItemReturn(order_id=str(order_id), item_id=str(item_id), reason=reason, actor_email=actor_email, **kwargs),
        asynchronous=False,
    )


def _resolve(order_id, item_id, decision, role="admin", **kwargs):
    return current_domain.process(
        ResolveItemReturn(
            order_id=str(order_id),
            item_id=str(item_id),
            decision=decision,
            actor_email="ops@example.com",
            actor_role=role,
            **kwargs,
        ),
        asynchronous=False,
    )


def _stored_item(order_id, item_id):
    order = current_domain.repository_for(Order).get(order_id)
    return order.item(item_id)


class TestRequestItemReturn:
    def test_owner_requests_return(self):
        order = _place_order()
        item_id = order.items[0].id
        _request(order.id, item_id, details="cracked base")

        item = _stored_item(order.id, item_id)
        assert item.return_status == "ReturnRequested"
        assert item.return_reason == "damaged"
        assert item.return_details == "cracked base"

    def test_owner_match_is_case_insensitive(self):
        order = _place_order()
        _request(order.id, order.items[0].id, actor_email="ASHA@EXAMPLE.COM")
        assert _stored_item(order.id, order.items[0].id).return_status == "ReturnRequested"

    def test_stranger_is_forbidden(self):
        order = _place_order()
        with pytest.raises(ForbiddenError):
            _request(order.id, order.items[0].id, actor_email="ravi@example.com")
        assert _stored_item(order.id, order.items[0].id).return_status == "NotReturned"

    def test_admin_does_not_bypass_ownership(self):
        order = _place_order()
        with pytest.raises(ForbiddenError):
            _request(order.id, order.items[0].id, actor_email="ops@example.com")

    def test_second_request_fails(self):
        order = _place_order()
        item_id = order.items[0].id
        _request(order.id, item_id)
        with pytest.raises(InvalidTransitionError) as exc:
            _request(order.id, item_id, reason="changed my mind")
        assert exc.value.current_status == "ReturnRequested"
        assert _stored_item(order.id, item_id).return_reason == "damaged"

    def test_blank_reason(self):
        order = _place_order()
        with pytest.raises(ValidationError):
            _request(order.id, order.items[0].id, reason="  ")

    def test_unknown_item(self):
        order = _place_order()
        with pytest.raises(ItemNotFoundError):
            _request(order.id, "3fa85f64-5717-4562-b3fc-2c963f66afa6")

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _request("3fa85f64-5717-4562-b3fc-2c963f66afa6", "3fa85f64-5717-4562-b3fc-2c963f66afa7")


class TestResolveItemReturn:
    def _requested(self):
        order = _place_order()
        item_id = order.items[0].id
        _request(order.id, item_id)
        return order, item_id

    def test_admin_accepts(self):
        order, item_id = self._requested()
        _resolve(order.id, item_id, "Returned")
        item = _stored_item(order.id, item_id)
        assert item.return_status == "Returned"
        assert item.return_resolved_by == "ops@example.com"

    def test_admin_rejects(self):
        order, item_id = self._requested()
        _resolve(order.id, item_id, "ReturnRejected")
        assert _stored_item(order.id, item_id).return_status == "ReturnRejected"

    def test_customer_is_forbidden(self):
        order, item_id = self._requested()
        with pytest.raises(ForbiddenError):
            _resolve(order.id, item_id, "Returned", role="customer")
        assert _stored_item(order.id, item_id).return_status == "ReturnRequested"

    def test_invalid_decision(self):
        order, item_id = self._requested()
        with pytest.raises(ValidationError):
            _resolve(order.id, item_id, "NotReturned")
        assert _stored_item(order.id, item_id).return_status == "ReturnRequested"

    def test_cannot_resolve_unrequested_item(self):
        order = _place_order()
        with pytest.raises(InvalidTransitionError) as exc:
            _resolve(order.id, order.items[1].id, "Returned")
        assert exc.value.current_status == "NotReturned"

    def test_cannot_resolve_twice(self):
        order, item_id = self._requested()
        _resolve(order.id, item_id, "Returned")
        with pytest.raises(InvalidTransitionError) as exc:
            _resolve(order.id, item_id, "ReturnRejected")
        assert exc.value.current_status == "Returned"
        assert _stored_item(order.id, item_id).return_status == "Returned"

    def test_order_status_is_independent(self):
        order, item_id = self._requested()
        _resolve(order.id, item_id, "Returned")
        assert current_domain.repository_for(Order).get(order.id).order_status == "Processing"
