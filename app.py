from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ezgif_api import __version__
from ezgif_api.config import ENDPOINTS, SERVICE_NAME, Settings
from ezgif_api.router import router as api_router
from ezgif_api.utils.error_handling import (
    ErrorCode,
    create_error_response,
    internal_error_detail,
)
from ezgif_api.utils.http_client import HTTPClientFactory, lifespan_http_clients
from ezgif_api.utils.logging_config import configure_logging, get_logger


logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the upstream client on startup and close it on shutdown."""
    settings: Settings = app.state.settings
    factory = HTTPClientFactory()
    app.state.http_factory = factory
    app.state.client = factory.create_client(timeout=settings.http_timeout)
    logger.info(f"{SERVICE_NAME} started (environment: {settings.environment})")

    async with lifespan_http_clients(factory):
        yield

    logger.info(f"{SERVICE_NAME} shutting down")


def _requested_path(request: Request) -> str:
    """Path as sent by the client, including the query string."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application for the given settings (read from the environment by default)."""
    settings = settings or Settings.from_env()
    configure_logging(settings)

    app = FastAPI(title=SERVICE_NAME, version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {
            "service": SERVICE_NAME,
            "status": "active",
            "endpoints": ENDPOINTS,
        }

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # A known path with the wrong method is reported as a miss too
        if exc.status_code in (404, 405):
            return create_error_response(ErrorCode.NOT_FOUND, path=_requested_path(request))
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return create_error_response(
            ErrorCode.INTERNAL_ERROR,
            message=internal_error_detail(exc, settings.is_production),
        )

    return app


app = create_app()


def main():
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
