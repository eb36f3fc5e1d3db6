"""ASGI entry point: ``uvicorn wms.main:app``."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wms.core.config import get_settings
from wms.core.database import get_engine
from wms.core.exceptions import register_exception_handlers
from wms.core.health import router as health_router
from wms.core.logging import configure_logging, get_logger
from wms.core.middleware import REQUEST_ID_HEADER, RequestIdMiddleware
from wms.features.batches.routes import router as batches_router
from wms.features.catalog.routes import router as catalog_router
from wms.features.dashboards.routes import router as dashboards_router
from wms.features.inquiries.routes import router as inquiries_router
from wms.features.inventory.routes import router as inventory_router
from wms.features.notifications.routes import router as notifications_router
from wms.features.profiles.routes import router as profiles_router
from wms.features.sales_orders.routes import router as sales_orders_router
from wms.features.stock_in.routes import router as stock_in_router
from wms.features.stock_out.routes import router as stock_out_router
from wms.features.warehouses.routes import router as warehouses_router

logger = get_logger(__name__)

# Goods flow order; also the order of sections in /docs.
ROUTERS: tuple[APIRouter, ...] = (
    health_router,
    profiles_router,
    catalog_router,
    warehouses_router,
    stock_in_router,
    batches_router,
    inventory_router,
    stock_out_router,
    inquiries_router,
    sales_orders_router,
    notifications_router,
    dashboards_router,
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configure_logging()
    logger.info("app.startup_completed", app_env=settings.app_env, debug=settings.debug)

    yield

    await get_engine().dispose()
    logger.info("app.shutdown_completed")


def create_app() -> FastAPI:
    settings = get_settings()
    show_docs = not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        description="Warehouse management: stock-in, batches, inventory, stock-out and sales",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    # Added last so it wraps CORS and every error response gets the header.
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()
