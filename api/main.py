from dotenv import load_dotenv
load_dotenv()

import logfire


def configure_logging():
    """
    Configure Logfire. Spans are only exported when LOGFIRE_TOKEN is set;
    otherwise they stay local.
    """
    try:
        logfire.configure(send_to_logfire="if-token-present", service_name="simulacro-stats-api")
    except Exception as e:
        print(f"Logfire not configured (running without observability): {e}")
        logfire.configure(send_to_logfire=False)


# Configure Logfire BEFORE building the app so startup logs are captured
configure_logging()

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

import config
from database import ConnectionPool
from models.stats_models import ErrorResponse
from routers import health, stats
from static_files import UncachedStaticFiles

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


def instrument_fastapi(app: FastAPI):
    """Trace requests through Logfire, if the FastAPI integration is installed."""
    try:
        logfire.instrument_fastapi(app)
    except Exception as e:
        logfire.warn("Logfire FastAPI instrumentation unavailable", error=str(e))


def instrument_sqlalchemy(pool: ConnectionPool):
    """Trace SQL statements through Logfire, if the SQLAlchemy integration is installed."""
    try:
        logfire.instrument_sqlalchemy(engine=pool.engine)
    except Exception as e:
        logfire.warn("Logfire SQLAlchemy instrumentation unavailable", error=str(e))


def create_app(pool: Optional[ConnectionPool] = None, static_dir: Optional[str] = None) -> FastAPI:
    """
    Build the API. When ``pool`` is omitted one is created from the environment
    at startup and disposed at shutdown; a supplied pool is left to its owner.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan event handler for startup and shutdown
        """
        # Startup
        owns_pool = pool is None
        app.state.pool = ConnectionPool.from_settings() if owns_pool else pool
        instrument_sqlalchemy(app.state.pool)
        logfire.info("Simulacro stats API started successfully", port=config.PORT)

        yield

        # Shutdown
        logfire.info("Shutting down simulacro stats API...")
        if owns_pool:
            app.state.pool.dispose()

    app = FastAPI(
        title="Simulacro Stats API",
        description="Read-only enrollment and payment statistics backed by MySQL",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    instrument_fastapi(app)

    @app.middleware("http")
    async def disable_caching(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(NO_CACHE_HEADERS)
        return response

    # Runs outside the middleware stack, so the no-cache headers are set here too
    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logfire.error(
            "Unhandled error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        body = ErrorResponse(error="Error interno del servidor", message=str(exc) or type(exc).__name__)
        return JSONResponse(status_code=500, content=body.model_dump(), headers=NO_CACHE_HEADERS)

    # Include Routers
    app.include_router(stats.router, prefix="/api", tags=["stats"])
    app.include_router(health.router, tags=["health"])

    # Static fallback must be mounted last so it never shadows the API
    app.mount(
        "/",
        UncachedStaticFiles(directory=static_dir or config.STATIC_DIR, html=True),
        name="static",
    )

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
