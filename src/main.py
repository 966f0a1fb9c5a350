"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
     or:  user-cache-service   (listens on settings.PORT)
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, settings
from src.uc_common.database import create_engine_from_settings, create_session_factory
from src.uc_common.errors import AppError, ValidationError
from src.uc_common.logging_config import configure_logging
from src.uc_common.redis_client import RedisCache
from src.uc_common.response import error_response
from src.uc_gateway.middleware.request_log import RequestLogMiddleware
from src.uc_users.api.router import router as users_router
from src.uc_users.application.service import UserApplicationService
from src.uc_users.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: connect store + cache, ensure schema. Shutdown: dispose."""
        async with AsyncExitStack() as stack:
            # Callbacks unwind in reverse, so a failed startup still releases
            # whatever was already acquired.
            stack.callback(logger.info, "Store and cache connections closed")

            engine = create_engine_from_settings(app_settings)
            stack.push_async_callback(engine.dispose)
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connected successfully")

            repo = UserRepository(create_session_factory(engine))
            await repo.ensure_schema()

            cache = RedisCache.from_url(app_settings.REDIS_URL)
            stack.push_async_callback(cache.close)
            await cache.ping()

            app.state.user_service = UserApplicationService(repo, cache)
            yield

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content=error_response(exc.message).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed body / non-integer id → 400 like any other ValidationError
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return await app_error_handler(request, ValidationError(f"Invalid request: {detail}"))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Something broke!").model_dump(),
        )

    app.include_router(users_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()


def run() -> None:
    configure_logging(settings.DEBUG)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
