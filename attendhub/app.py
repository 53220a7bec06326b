"""
FastAPI application entry point for the attendance API.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from attendhub.config import CORS_METHODS, get_settings
from attendhub.db import DbClient
from attendhub.dependencies import ensure_schema, get_db_client
from attendhub.errors import INVALID_PAYLOAD, SERVER_ERROR
from attendhub.routes import router

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Rejected payload for %s: %s", request.url.path, exc.errors())
    return _error(400, INVALID_PAYLOAD)


async def store_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Request to %s failed", request.url.path, exc_info=exc)
    return _error(500, SERVER_ERROR)


def create_app(db: DbClient | None = None) -> FastAPI:
    """
    Build the API. Passing ``db`` pins the storage backend (tests);
    otherwise it is selected from the environment on first use.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        provider = app.dependency_overrides.get(get_db_client, get_db_client)
        ensure_schema(provider())
        yield

    app = FastAPI(title="Attendhub API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
        allow_credentials=False,
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, store_exception_handler)
    app.include_router(router, prefix=settings.api_prefix)
    if db is not None:
        app.dependency_overrides[get_db_client] = lambda: db
    return app


app = create_app()
