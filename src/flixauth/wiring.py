from fastapi import FastAPI
from fastapi.responses import Response

from .config import Settings
from .metrics import metrics_response
from .middleware.metrics_middleware import MetricsMiddleware
from .routers import auth, health


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the routed application without touching the database or mail provider.

    Startup wiring lives in ``composition.wire_app``; tests call this and
    override ``get_db`` / ``get_email_sender`` instead.
    """
    app = FastAPI(title="flixauth")
    app.state.settings = settings or Settings()

    app.include_router(health.router)
    app.include_router(auth.router)
    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    return app


__all__ = ["create_app"]
