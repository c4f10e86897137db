"""Storefront FastAPI application.

Serves the catalogue, cart, checkout and order-history endpoints. The schema
is created on startup and, when STOREFRONT_SEED is on, the sample catalogue
is inserted into an empty products table.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory.api import product_router
from inventory.stock.catalogue import seed_products
from ordering.api import cart_router, checkout_router, order_router
from shared.api import register_exception_handlers
from shared.config import load_settings
from shared.database import configure, dispose, setup_db
from shared.logging import configure_logging, request_context

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    app.state.settings = settings
    configure_logging(settings)
    configure(settings.database_url)
    setup_db()
    if settings.seed_catalogue:
        seed_products()
    logger.info("Storefront started", env=settings.env)
    yield
    dispose()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Catalogue, cart and checkout",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind request id and caller to every log line emitted while handling the request.

    The request id is taken from X-Request-Id when the caller sends one and is
    echoed back on the response.
    """
    request_id = request.headers.get("X-Request-Id") or str(uuid4())
    with request_context(
        request_id=request_id,
        user_id=request.headers.get("X-User-Id"),
        path=request.url.path,
    ):
        response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health(request: Request):
    return JSONResponse(content={"status": "ok", "env": request.app.state.settings.env})
