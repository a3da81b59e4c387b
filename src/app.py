"""Storefront FastAPI application.

Serves the order API and the payment-intent endpoint. Order requests are
wrapped in the ordering domain context; payment and health requests need no
domain.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.domain import ordering
from ordering.utils.logging import bind_request_context, clear_request_context, configure_logging
from protean.integrations.fastapi import register_exception_handlers
from shared.handlers import register_error_handlers

configure_logging()

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay (test, development, production).
ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
}


def _resolve_domain(path: str):
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Picture-framing storefront: orders and payments",
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
    """Push the matching Protean domain context and tag log lines with a request id."""
    clear_request_context()
    bind_request_context(
        request_id=request.headers.get("X-Request-ID") or uuid4().hex,
        path=request.url.path,
    )

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            return await call_next(request)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handlers
# ---------------------------------------------------------------------------
from ordering.api import order_router  # noqa: E402
from payments.api import payment_router  # noqa: E402

app.include_router(order_router)
app.include_router(payment_router)

register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domains": {"ordering": {"name": ordering.name}}})
