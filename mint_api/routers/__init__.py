"""HTTP routers for mint_api."""

from .health import router as health_router
from .mint import router as mint_router

__all__ = ["health_router", "mint_router"]
