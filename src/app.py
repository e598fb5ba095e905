"""Ordering FastAPI application.

Processes order commands synchronously over HTTP. Every request under
``/orders`` runs inside the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in ordering/domain.toml.
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from ordering.domain import ordering  # noqa: E402
import ordering.identity as _identity  # noqa: F401  load the package before init() traverses its submodules
from ordering.utils.logging import clear_context

ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Estore Ordering API",
    description="Order lifecycle and per-item return management",
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context for order requests."""
    clear_context()
    if request.url.path.startswith("/orders"):
        with ordering.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers and error handlers
# ---------------------------------------------------------------------------
from ordering.api import order_router, register_error_handlers  # noqa: E402

app.include_router(order_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": ordering.name})
