"""ShopCore FastAPI application.

Web server for the checkout pipeline. Commands are processed synchronously
inside the `checkout` domain context, pushed once per request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied.
from uuid import uuid4

from checkout.domain import checkout
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from checkout.utils.logging import bind_request_context, clear_request_context

checkout.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ShopCore API",
    description="Cart, order and payment reconciliation pipeline",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the checkout domain context and bind request details to the log context."""
    bind_request_context(
        request_id=request.headers.get("X-Request-Id") or uuid4().hex,
        method=request.method,
        path=request.url.path,
    )
    try:
        with checkout.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from checkout.api import (  # noqa: E402
    cart_router,
    customer_router,
    order_router,
    product_router,
    register_error_handlers,
    webhook_router,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(product_router)
app.include_router(customer_router)
app.include_router(webhook_router)

register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": checkout.name})
