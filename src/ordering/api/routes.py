"""FastAPI routes for the Ordering domain — orders and item returns."""

import json

from fastapi import APIRouter, Depends, Query

from ordering.api.dependencies import get_principal
from ordering.api.schemas import (
    ChangeOrderStatusRequest,
    OrderListResponse,
    OrderResponse,
    PendingReturnsResponse,
    PlaceOrderRequest,
    RequestItemReturnRequest,
    ResolveItemReturnRequest,
    ReturnRequestResponse,
)
from ordering.identity import Principal
from ordering.order import queries
from ordering.order.dispatch import dispatch
from ordering.order.placement import PlaceOrder
from ordering.order.returns import RequestItemReturn, ResolveItemReturn
from ordering.order.status import ChangeOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    command = PlaceOrder(
        billing_data=json.dumps(body.billing_data.model_dump(exclude_none=True)),
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_fee=body.shipping_fee,
        grand_total=body.grand_total,
        payment_method=body.payment_method,
        payment_status=body.payment_status,
        gateway_order_id=body.gateway_order_id,
        gateway_payment_id=body.gateway_payment_id,
        gateway_signature=body.gateway_signature,
    )
    order = dispatch(command)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def change_order_status(
    order_id: str,
    body: ChangeOrderStatusRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    command = ChangeOrderStatus(
        order_id=order_id,
        order_status=body.order_status,
        actor_email=principal.email,
        actor_role=principal.role,
        expected_revision=body.expected_revision,
    )
    order = dispatch(command)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/items/{item_id}/return", response_model=OrderResponse)
async def request_item_return(
    order_id: str,
    item_id: str,
    body: RequestItemReturnRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    command = RequestItemReturn(
        order_id=order_id,
        item_id=item_id,
        reason=body.reason,
        details=body.details,
        actor_email=principal.email,
        expected_revision=body.expected_revision,
    )
    order = dispatch(command)
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/items/{item_id}/resolve-return", response_model=OrderResponse)
async def resolve_item_return(
    order_id: str,
    item_id: str,
    body: ResolveItemReturnRequest,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    command = ResolveItemReturn(
        order_id=order_id,
        item_id=item_id,
        decision=body.decision,
        actor_email=principal.email,
        actor_role=principal.role,
        expected_revision=body.expected_revision,
    )
    order = dispatch(command)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
) -> OrderListResponse:
    orders, total = queries.list_orders(principal.email, principal.role, limit=limit, offset=offset)
    return OrderListResponse(orders=[OrderResponse.from_order(o) for o in orders], total=total)


@order_router.get("/mine", response_model=OrderListResponse)
async def list_my_orders(
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
) -> OrderListResponse:
    orders, total = queries.list_customer_orders(principal.email, limit=limit, offset=offset)
    return OrderListResponse(orders=[OrderResponse.from_order(o) for o in orders], total=total)


@order_router.get("/returns/pending", response_model=PendingReturnsResponse)
async def list_pending_returns(
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(get_principal),
) -> PendingReturnsResponse:
    records = queries.pending_returns(principal.email, principal.role, limit=limit, offset=offset)
    return PendingReturnsResponse(
        returns=[
            ReturnRequestResponse(
                order_id=str(r.order_id),
                item_id=str(r.item_id),
                item_name=r.item_name,
                quantity=r.quantity,
                customer_email=r.customer_email,
                reason=r.reason,
                details=r.details,
                requested_at=r.requested_at,
            )
            for r in records
        ]
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(get_principal)) -> OrderResponse:
    order = queries.get_order(order_id, principal.email, principal.role)
    return OrderResponse.from_order(order)
