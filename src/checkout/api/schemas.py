"""Pydantic request/response schemas for the checkout API.

These are external contracts (anti-corruption layer): separate from
internal Protean commands. Quantities are only checked for being integers
here; positivity and stock are the pipeline's concern and surface as 400/409.
"""

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class LineSchema(BaseModel):
    product_id: str
    quantity: StrictInt


class AddressSchema(BaseModel):
    street: str
    suburb: str | None = None
    postcode: str | None = None
    state: str | None = None
    country: str | None = None


class PaginationSchema(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartLinesRequest(BaseModel):
    lines: list[LineSchema]

    model_config = {
        "json_schema_extra": {
            "examples": [{"lines": [{"product_id": "prod-001", "quantity": 2}]}]
        }
    }


class UpdateCartLineRequest(BaseModel):
    quantity: StrictInt


class CartLineView(BaseModel):
    product_id: str
    quantity: int
    available: bool
    name: str | None = None
    price: float | None = None
    product_type: str | None = None
    thumbnail: str | None = None
    subtotal: float | None = None


class CartView(BaseModel):
    user_id: str
    lines: list[CartLineView]
    total: float
    updated_at: datetime | None = None


class CartClearedResponse(BaseModel):
    lines_removed: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    lines: list[LineSchema] | None = None


class OrderLineView(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderView(BaseModel):
    order_id: str
    user_id: str
    user_email: str | None = None
    status: str
    lines: list[OrderLineView]
    total: float
    shipping_address: AddressSchema | None = None
    created_at: datetime | None = None
    paid_at: datetime | None = None


class CheckoutSessionView(BaseModel):
    session_id: str
    redirect_url: str


class CreateOrderResponse(BaseModel):
    order: OrderView
    checkout: CheckoutSessionView


class OrderListResponse(BaseModel):
    orders: list[OrderView]
    pagination: PaginationSchema


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    description: str | None = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    product_type: str | None = None
    thumbnail: str | None = None


class RestockProductRequest(BaseModel):
    quantity: int = Field(gt=0)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductView(BaseModel):
    id: str
    name: str
    price: float
    stock: int
    product_type: str | None = None
    thumbnail: str | None = None


class StockResponse(BaseModel):
    product_id: str
    stock: int


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
class RegisterCustomerRequest(BaseModel):
    email: str
    name: str | None = None


class CustomerIdResponse(BaseModel):
    customer_id: str


# ---------------------------------------------------------------------------
# Webhooks
# ---------------------------------------------------------------------------
class WebhookAckResponse(BaseModel):
    received: bool
    order_id: str | None = None
    outcome: str
