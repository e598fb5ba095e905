"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Field aliases accept the camelCase names used by
the storefront (``billingData``, ``cartItems``, ``grandTotal`` ...).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class BillingDataSchema(_Request):
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    company_name: str | None = Field(None, alias="companyName")
    country: str | None = None
    address: str | None = None
    address_two: str | None = Field(None, alias="addressTwo")
    town: str | None = None
    phone: str | None = None
    email: str = Field(min_length=3)


class OrderItemSchema(_Request):
    product_id: str | None = Field(None, alias="productId")
    name: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    discounted_price: float | None = Field(None, ge=0, alias="discountedPrice")
    image_ref: str | None = Field(None, alias="image")


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(_Request):
    billing_data: BillingDataSchema = Field(alias="billingData")
    items: list[OrderItemSchema] = Field(min_length=1, alias="cartItems")
    shipping_fee: float = Field(0.0, ge=0, alias="shippingFee")
    grand_total: float = Field(ge=0, alias="grandTotal")
    payment_method: str = Field(alias="paymentMethod")
    payment_status: str = Field(alias="paymentStatus")
    gateway_order_id: str | None = Field(None, alias="gatewayOrderId")
    gateway_payment_id: str | None = Field(None, alias="gatewayPaymentId")
    gateway_signature: str | None = Field(None, alias="gatewaySignature")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "billingData": {"firstName": "Asha", "email": "asha@example.com"},
                    "cartItems": [{"name": "Desk Lamp", "quantity": 1, "price": 40.0}],
                    "shippingFee": 5.0,
                    "grandTotal": 45.0,
                    "paymentMethod": "cod",
                    "paymentStatus": "Cash On Delivery",
                }
            ]
        },
    )


class ChangeOrderStatusRequest(_Request):
    order_status: str = Field(alias="orderStatus")
    expected_revision: int | None = Field(None, ge=0, alias="expectedRevision")


class RequestItemReturnRequest(_Request):
    reason: str
    details: str | None = None
    expected_revision: int | None = Field(None, ge=0, alias="expectedRevision")


class ResolveItemReturnRequest(_Request):
    decision: str = Field(alias="newReturnStatus")
    expected_revision: int | None = Field(None, ge=0, alias="expectedRevision")


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class BillingDataResponse(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    country: str | None = None
    address: str | None = None
    address_two: str | None = None
    town: str | None = None
    phone: str | None = None
    email: str


class OrderItemResponse(BaseModel):
    item_id: str
    product_id: str | None = None
    name: str
    quantity: int
    price: float
    discounted_price: float | None = None
    image_ref: str | None = None
    return_status: str
    return_reason: str | None = None
    return_details: str | None = None
    return_requested_at: datetime | None = None
    return_resolved_at: datetime | None = None
    return_resolved_by: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    billing_data: BillingDataResponse
    items: list[OrderItemResponse]
    shipping_fee: float
    grand_total: float
    payment_method: str
    payment_status: str
    order_status: str
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    revision: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        billing = order.billing_data
        return cls(
            order_id=str(order.id),
            billing_data=BillingDataResponse(
                first_name=billing.first_name,
                last_name=billing.last_name,
                company_name=billing.company_name,
                country=billing.country,
                address=billing.address,
                address_two=billing.address_two,
                town=billing.town,
                phone=billing.phone,
                email=billing.email,
            ),
            items=[
                OrderItemResponse(
                    item_id=str(item.id),
                    product_id=str(item.product_id) if item.product_id else None,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    discounted_price=item.discounted_price,
                    image_ref=item.image_ref,
                    return_status=item.return_status,
                    return_reason=item.return_reason,
                    return_details=item.return_details,
                    return_requested_at=item.return_requested_at,
                    return_resolved_at=item.return_resolved_at,
                    return_resolved_by=item.return_resolved_by,
                )
                for item in order.items
            ],
            shipping_fee=order.shipping_fee or 0.0,
            grand_total=order.grand_total,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            order_status=order.order_status,
            gateway_order_id=order.gateway_order_id,
            gateway_payment_id=order.gateway_payment_id,
            revision=order._version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int


class ReturnRequestResponse(BaseModel):
    order_id: str
    item_id: str
    item_name: str | None = None
    quantity: int | None = None
    customer_email: str
    reason: str | None = None
    details: str | None = None
    requested_at: datetime | None = None


class PendingReturnsResponse(BaseModel):
    returns: list[ReturnRequestResponse]
