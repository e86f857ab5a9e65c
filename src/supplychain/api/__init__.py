"""Supply-chain API package."""

from supplychain.api.errors import install_error_handlers
from supplychain.api.routes import drafts_router, drivers_router, orders_router

__all__ = ["drafts_router", "orders_router", "drivers_router", "install_error_handlers"]
