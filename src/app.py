"""Supply-chain FastAPI application.

Serves the agency, head-office and logistics screens over HTTP. Commands are
processed synchronously inside the supply-chain domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml
# (memory stores by default, PostgreSQL under "production").
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from supplychain.domain import supplychain  # noqa: E402
from supplychain.utils.logging import clear_context

supplychain.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Supply Chain API",
    description="Agency drafts, head-office approval and logistics dispatch",
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
    """Push the supply-chain domain context for each request."""
    clear_context()
    with supplychain.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from supplychain.api import (  # noqa: E402
    drafts_router,
    drivers_router,
    install_error_handlers,
    orders_router,
)

app.include_router(drafts_router)
app.include_router(orders_router)
app.include_router(drivers_router)
install_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": supplychain.name})
