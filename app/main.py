from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.deps import get_db
from app.core.logging import configure_logging
from app.models.report import ErrorResponse
from app.routers.health import router as health_router
from app.routers.industries import router as industries_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_started", env=settings.APP_ENV, version=settings.APP_VERSION)
    yield
    get_db().close()
    logger.info("app_stopped")


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=ErrorResponse().model_dump())


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unhandled_error)

    app.include_router(health_router)
    app.include_router(industries_router)

    return app


app = create_app()
