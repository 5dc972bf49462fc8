"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from uvwie_revenue.api.middleware import RequestIDMiddleware, MetricsMiddleware
from uvwie_revenue.api.v1 import payments, permits, quotes, shops
from uvwie_revenue.infrastructure.observability.logging import setup_logging
from uvwie_revenue.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Uvwie Revenue Core",
        description="Fee, penalty, dues and compliance calculations for the Uvwie LGA revenue system",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(quotes.router, prefix="/v1", tags=["quotes"])
    app.include_router(shops.router, prefix="/v1", tags=["shops"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(permits.router, prefix="/v1", tags=["permits"])

    return app


app = create_app()
