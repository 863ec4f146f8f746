from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .config import Settings, load_config
from .logging import get_logger, setup_logging
from .middleware.errors import install_error_handlers
from .middleware.logging import install_access_log_middleware
from .middleware.request_id import install_request_id_middleware
from .routers.health import router as health_router
from .routers.mint import router as mint_router
from .services.mint import MintService
from .version import __version__

log = get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    cfg: Settings = app.state.config
    log.info(
        "service_started",
        version=__version__,
        backend=cfg.mint_backend,
        state_path=str(cfg.state_path),
        authority=cfg.authority_address,
    )
    try:
        yield
    finally:
        log.info("service_stopped")


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI factory. Configures logging, mounts middleware, error handlers
    and routers, and attaches the mint service to ``app.state``.
    """
    cfg = config or load_config()
    setup_logging(service_name=cfg.service_name, level=cfg.log_level)

    app = FastAPI(
        title="Aurora NFT Mint API",
        version=__version__,
        lifespan=_lifespan,
    )
    app.state.config = cfg
    app.state.mint_service = MintService(cfg)

    # request-id must wrap access logging, so it is added last
    install_access_log_middleware(app)
    install_request_id_middleware(app)

    install_error_handlers(app)

    app.include_router(mint_router, prefix="")
    app.include_router(health_router, prefix="")

    return app
