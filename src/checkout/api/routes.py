"""FastAPI endpoints for the checkout pipeline.

User identity comes from the authentication layer in front of this service,
which forwards the authenticated user's id in the X-User-Id header.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from protean.utils.globals import current_domain

from checkout.api.schemas import (
    AddCartLinesRequest,
    CancelOrderRequest,
    CartClearedResponse,
    CartView,
    CheckoutSessionView,
    CreateOrderRequest,
    CreateOrderResponse,
    CreateProductRequest,
    CustomerIdResponse,
    OrderListResponse,
    OrderView,
    ProductIdResponse,
    ProductView,
    RegisterCustomerRequest,
    RestockProductRequest,
    StockResponse,
    UpdateCartLineRequest,
    WebhookAckResponse,
)
from checkout.cart.engine import CartEngine
from checkout.catalogue.management import RegisterProduct, RestockProduct
from checkout.catalogue.reader import CatalogueReader
from checkout.customer.profile import ProfileStore, RegisterCustomer
from checkout.errors import NotFound
from checkout.gateway import get_gateway
from checkout.order.compiler import OrderCompiler
from checkout.order.service import OrderService
from checkout.order.views import order_view
from checkout.payment.session import CheckoutSessionBridge
from checkout.payment.webhook import handle_webhook
from checkout.utils.logging import bind_request_context

cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
product_router = APIRouter(prefix="/products", tags=["products"])
customer_router = APIRouter(prefix="/customers", tags=["customers"])
webhook_router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    bind_request_context(user_id=x_user_id)
    return x_user_id


def _lines(body_lines) -> list[dict]:
    return [line.model_dump() for line in body_lines]


# --- Cart endpoints ---


@cart_router.get("", response_model=CartView)
async def get_cart(user_id: str = Depends(current_user_id)) -> CartView:
    return CartView(**CartEngine().get_by_user(user_id))


@cart_router.post("", response_model=CartView)
async def add_to_cart(body: AddCartLinesRequest, user_id: str = Depends(current_user_id)) -> CartView:
    """Add lines to the cart; quantities are added to what is already there."""
    view = CartEngine().add_or_update(user_id, _lines(body.lines), is_update=False)
    return CartView(**view)


@cart_router.put("/{product_id}", response_model=CartView)
async def set_cart_quantity(
    product_id: str,
    body: UpdateCartLineRequest,
    user_id: str = Depends(current_user_id),
) -> CartView:
    """Set a line's quantity outright."""
    view = CartEngine().add_or_update(
        user_id,
        [{"product_id": product_id, "quantity": body.quantity}],
        is_update=True,
    )
    return CartView(**view)


@cart_router.delete("/{product_id}", response_model=CartView)
async def remove_from_cart(product_id: str, user_id: str = Depends(current_user_id)) -> CartView:
    return CartView(**CartEngine().remove(user_id, product_id))


@cart_router.delete("", response_model=CartClearedResponse)
async def clear_cart(user_id: str = Depends(current_user_id)) -> CartClearedResponse:
    return CartClearedResponse(lines_removed=CartEngine().clear(user_id))


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=CreateOrderResponse)
async def create_order(body: CreateOrderRequest, user_id: str = Depends(current_user_id)) -> CreateOrderResponse:
    """Compile an order and open a checkout session for it.

    Without explicit lines the user's cart is ordered. The cart itself is left
    alone until payment for the order is received; ordering an unchanged cart
    again returns the same pending order with a fresh session.
    """
    compiler = OrderCompiler()
    if body.lines is not None:
        order = compiler.compile_order(user_id, _lines(body.lines))
    else:
        try:
            cart = CartEngine().get_cart(user_id)
        except NotFound:
            lines = []
        else:
            lines = [{"product_id": str(line.product_id), "quantity": line.quantity} for line in cart.lines]
        order = compiler.checkout_cart(user_id, lines)

    profiles = ProfileStore()
    session = CheckoutSessionBridge().create_session(order, profiles.email_for(user_id))
    return CreateOrderResponse(
        order=OrderView(**order_view(order, profiles)),
        checkout=CheckoutSessionView(**session),
    )


@order_router.get("/me", response_model=OrderListResponse)
async def list_my_orders(
    page: int = Query(default=1),
    limit: int = Query(default=10),
    user_id: str = Depends(current_user_id),
) -> OrderListResponse:
    result = OrderService().list_for_user(user_id, page=page, limit=limit)
    profiles = ProfileStore()
    return OrderListResponse(
        orders=[OrderView(**order_view(order, profiles)) for order in result["orders"]],
        pagination=result["pagination"],
    )


@order_router.get("/{order_id}", response_model=OrderView)
async def get_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderView:
    order = OrderService().get_for_user(order_id, user_id)
    return OrderView(**order_view(order))


@order_router.post("/{order_id}/cancel", response_model=OrderView)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    user_id: str = Depends(current_user_id),
) -> OrderView:
    reason = body.reason if body else None
    order = OrderService().cancel(order_id, user_id, reason=reason)
    return OrderView(**order_view(order))


@order_router.post("/{order_id}/checkout-session", response_model=CheckoutSessionView)
async def create_checkout_session(order_id: str, user_id: str = Depends(current_user_id)) -> CheckoutSessionView:
    """Open a fresh checkout session for a pending order."""
    order = OrderService().get_for_user(order_id, user_id)
    session = CheckoutSessionBridge().create_session(order, ProfileStore().email_for(user_id))
    return CheckoutSessionView(**session)


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
        product_type=body.product_type,
        thumbnail=body.thumbnail,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@product_router.get("/{product_id}", response_model=ProductView)
async def get_product(product_id: str) -> ProductView:
    snapshot = CatalogueReader().find_product(product_id)
    return ProductView(
        id=snapshot.id,
        name=snapshot.name,
        price=snapshot.price,
        stock=snapshot.stock,
        product_type=snapshot.product_type,
        thumbnail=snapshot.thumbnail,
    )


@product_router.post("/{product_id}/restock", response_model=StockResponse)
async def restock_product(product_id: str, body: RestockProductRequest) -> StockResponse:
    stock = current_domain.process(
        RestockProduct(product_id=product_id, quantity=body.quantity),
        asynchronous=False,
    )
    return StockResponse(product_id=product_id, stock=stock)


# --- Customer endpoints ---


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    customer_id = current_domain.process(
        RegisterCustomer(email=body.email, name=body.name),
        asynchronous=False,
    )
    return CustomerIdResponse(customer_id=customer_id)


# --- Webhook endpoints ---


@webhook_router.post("/payment", response_model=WebhookAckResponse)
async def payment_webhook(request: Request) -> WebhookAckResponse:
    """Receive a payment provider delivery. Verified against the raw body."""
    gateway = get_gateway()
    payload = await request.body()
    signature = request.headers.get(gateway.signature_header, "")
    return WebhookAckResponse(**handle_webhook(payload, signature, gateway=gateway))
