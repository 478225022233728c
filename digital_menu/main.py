"""
Digital Menu - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from digital_menu import __version__
from digital_menu.api import auth, categories, menu, menu_items, news
from digital_menu.config import Settings, settings as default_settings
from digital_menu.runtime import start_runtime, stop_runtime

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Configure structured logging on top of stdlib logging"""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


async def backend_error_handler(request: Request, exc: SQLAlchemyError):
    """Backend failures abort the request with a user-facing message"""
    logger.error(
        "Backend operation failed",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "The menu service is temporarily unavailable"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info("Starting Digital Menu API", version=__version__)
        app.state.runtime = await start_runtime(settings)
        yield
        await stop_runtime(app.state.runtime)
        logger.info("Shutting down Digital Menu API")

    app = FastAPI(
        title="Digital Menu",
        description="Restaurant digital menu with an admin dashboard",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SQLAlchemyError, backend_error_handler)

    # Health check endpoints
    @app.get("/health")
    async def health():
        """Basic health check"""
        return {"status": "healthy", "service": "api", "version": __version__}

    @app.get("/health/ready")
    async def ready(request: Request):
        """Readiness check with dependency verification"""
        runtime = request.app.state.runtime
        checks = {}

        try:
            async with runtime.session_factory() as db:
                await db.execute(text("SELECT 1"))
            checks["database"] = "ok"
        except SQLAlchemyError as e:
            checks["database"] = f"failed: {str(e)}"

        store = runtime.menu_store
        checks["menu"] = "ok" if store.error is None else f"stale: {store.error}"

        all_ok = all(v == "ok" for v in checks.values())

        return {
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        }

    # Public routers
    app.include_router(menu.router, prefix="/menu", tags=["Menu"])
    app.include_router(news.router, prefix="/news", tags=["News"])

    # Auth
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])

    # Admin routers
    app.include_router(categories.router, prefix="/admin/categories", tags=["Admin"])
    app.include_router(menu_items.router, prefix="/admin/menu-items", tags=["Admin"])
    app.include_router(menu_items.selection_router, prefix="/admin/menu", tags=["Admin"])
    app.include_router(news.admin_router, prefix="/admin/news", tags=["Admin"])

    return app


configure_logging(default_settings)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "digital_menu.main:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_debug,
    )
