"""
Cart Engine Application

Shopping cart service: cart lines, coupons and derived totals, persisted
per session to local durable storage.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from .core.config import Settings, get_settings
from .database.coupons import coupon_db
from .database.local_store import LocalStore
from .routes import products_router, cart_router
from .services.analytics import AnalyticsNotifier, HttpAnalyticsSink
from .services.sessions import CartSessionManager

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Cart storage: {settings.storage_dir}")
    logger.info(f"Analytics: {settings.analytics_url or 'disabled'}")
    yield
    if app.state.analytics_sink is not None:
        await app.state.analytics_sink.close()
    logger.info(f"{settings.app_name} shutting down...")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its session registry"""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Shopping cart state, coupons and pricing",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    notifier = AnalyticsNotifier()
    analytics_sink = None
    if settings.analytics_url:
        analytics_sink = HttpAnalyticsSink(settings.analytics_url, timeout=settings.analytics_timeout)
        notifier.subscribe(analytics_sink)

    app.state.settings = settings
    app.state.analytics_sink = analytics_sink
    app.state.sessions = CartSessionManager(
        LocalStore(settings.storage_dir),
        coupon_db,
        policy=settings.pricing_policy(),
        notifier=notifier,
        storage_key=settings.storage_key,
        max_sessions=settings.max_live_sessions,
    )

    app.include_router(products_router)
    app.include_router(cart_router)

    @app.get("/")
    async def home():
        return {
            "message": f"{settings.app_name} API",
            "docs": "/docs",
            "endpoints": {
                "products": "/api/products",
                "cart": "/api/cart",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "cart-engine"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cart_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
