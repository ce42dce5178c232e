import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter
from infrastructure.logging import (
    bind_request_context,
    get_correlation_id,
    get_module_logger,
)
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()


def create_app() -> FastAPI:
    """Build the FastAPI application serving the notification API."""
    settings = get_settings()

    app = FastAPI(title="notifications", lifespan=lifespan)
    setup_rate_limiter(app)

    allow_origins = (
        ["*"]
        if settings.is_production
        else [
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        with bind_request_context(
            correlation_id=request.headers.get("X-Correlation-ID"),
            request_path=request.url.path,
            request_method=request.method,
        ):
            started = time.monotonic()
            response = await call_next(request)
            logger.info(
                "http_request",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 1),
            )
            response.headers["X-Correlation-ID"] = get_correlation_id() or ""
            return response

    app.include_router(api_router)
    return app


handler = create_app()
