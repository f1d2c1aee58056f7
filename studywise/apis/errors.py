"""Translate package errors into HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from studywise.core.errors import (
    ModelInvocationError,
    ModelTimeout,
    NoMediaReturned,
    OutputSchemaViolation,
    SchemaViolation,
    UnknownFlow,
)
from studywise.core.logging import get_logger
from studywise.modules.workspaces.store import NotFound, StoreError
from .flows.schemas import FlowErrorResponse, ViolationRead

logger = get_logger(__name__)


def _body(exc: Exception, *, flow: str | None = None, violations=None) -> dict:
    return FlowErrorResponse(
        error=type(exc).__name__,
        flow=flow,
        message=str(exc),
        violations=[
            ViolationRead(path=v.path, message=v.message) for v in (violations or [])
        ],
    ).model_dump()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SchemaViolation)
    async def _schema_violation(request: Request, exc: SchemaViolation):
        # Output violations are the provider's fault, not the caller's
        code = (
            status.HTTP_502_BAD_GATEWAY
            if isinstance(exc, OutputSchemaViolation)
            else 422
        )
        return JSONResponse(
            status_code=code,
            content=_body(exc, flow=exc.flow, violations=exc.violations),
        )

    @app.exception_handler(ModelInvocationError)
    async def _model_error(request: Request, exc: ModelInvocationError):
        code = (
            status.HTTP_504_GATEWAY_TIMEOUT
            if isinstance(exc, ModelTimeout)
            else status.HTTP_502_BAD_GATEWAY
        )
        return JSONResponse(status_code=code, content=_body(exc, flow=exc.flow))

    @app.exception_handler(NoMediaReturned)
    async def _no_media(request: Request, exc: NoMediaReturned):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content=_body(exc, flow=exc.flow)
        )

    @app.exception_handler(UnknownFlow)
    async def _unknown_flow(request: Request, exc: UnknownFlow):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_body(exc))

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_body(exc))

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError):
        logger.error("store error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_body(exc)
        )
