"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintrack_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintrack_gateway.api.v1 import financial_health, projections, returns, savings_goals
from fintrack_gateway.infrastructure.observability.logging import setup_logging
from fintrack_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Fintrack Analytics Gateway",
        description="Returns, projections, retirement planning and financial health scoring",
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

    app.include_router(returns.router, prefix="/v1", tags=["returns"])
    app.include_router(projections.router, prefix="/v1", tags=["projections"])
    app.include_router(financial_health.router, prefix="/v1", tags=["financial-health"])
    app.include_router(savings_goals.router, prefix="/v1", tags=["savings-goals"])

    return app


app = create_app()
