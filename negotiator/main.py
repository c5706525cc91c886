"""Application entrypoint: FastAPI factory and ``python -m negotiator.main``."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session, sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from negotiator.api import health
from negotiator.api.router import get_api_router
from negotiator.core.config import Config, get_config
from negotiator.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from negotiator.database.db import build_engine, build_session_factory

logger = logging.getLogger(__name__)

ROUTE_DIRECTORY = {
    "health": "GET /health",
    "api": {
        "userInfo": "GET /api/userinfo?phone_number=",
        "negotiation": "GET|POST /api/negotiation",
        "callResult": "POST /api/call_result",
        "callSessions": "GET /api/call-sessions",
        "callSessionAnalytics": "GET /api/call-sessions/analytics",
        "callSession": "GET /api/call-sessions/{session_id}",
    },
    "vapi": {
        "getUserInfo": "POST /api/vapi/get-user-info",
        "negotiate": "POST /api/vapi/negotiate",
        "saveResult": "POST /api/vapi/save-result",
        "functionCall": "POST /api/vapi/function-call",
        "webhook": "POST /api/vapi/webhook",
    },
}


def _error_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


def _invalid_request(details: list[dict[str, Any]]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "Invalid request parameters", "details": details}),
    )


def register_exception_handlers(app: FastAPI, config: Config) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _invalid_request(_error_details(list(exc.errors())))

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
        return _invalid_request(_error_details(exc.errors(include_url=False)))

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _invalid_request(exc.details or [{"msg": str(exc)}])

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        logger.warning(
            "auth.rejected",
            extra={"event": "auth.rejected", "path": request.url.path, "reason": str(exc)},
        )
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": str(exc)})

    @app.exception_handler(AuthorizationError)
    async def authorization_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": "Endpoint not found", "path": request.url.path},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "http.unhandled_error",
            exc_info=exc,
            extra={"event": "http.unhandled_error", "path": request.url.path, "method": request.method},
        )
        message = "Internal server error" if config.is_production else str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})


def create_app(
    config: Config | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> FastAPI:
    """Build the API around an explicit config and session factory."""
    cfg = config or get_config()
    if session_factory is None:
        session_factory = build_session_factory(build_engine(cfg))

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, debug=cfg.DEBUG)
    app.state.config = cfg
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.CORS_ORIGINS) or ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key", "X-VAPI-Signature"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http.request",
            extra={
                "event": "http.request",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    register_exception_handlers(app, cfg)
    app.include_router(health.router)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {
            "service": cfg.APP_NAME,
            "version": cfg.APP_VERSION,
            "status": "running",
            "endpoints": ROUTE_DIRECTORY,
        }

    return app


def run() -> None:
    import uvicorn

    from negotiator.core.startup import bootstrap

    cfg = get_config()
    engine = build_engine(cfg)
    bootstrap(cfg, engine)
    uvicorn.run(
        create_app(cfg, build_session_factory(engine)),
        host=cfg.API_HOST,
        port=cfg.API_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
