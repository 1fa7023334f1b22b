"""
FastAPI webhook server for receiving AlertManager notifications.

``create_app`` builds an independent application around a HealDispatcher;
nothing is registered globally, so several instances can live side by side.
The caller always gets the same empty 200 for a well-formed payload, whatever
the restarts did. Malformed payloads are rejected with 400 before anything is
dispatched.
"""

import time
import uuid
from datetime import datetime

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .dispatcher import HealDispatcher
from .exceptions import ParseError
from .models import AlertBatch


logger = structlog.get_logger(__name__)


def _timestamp() -> str:
    return datetime.fromtimestamp(time.time()).isoformat() + "Z"


def parse_batch(body: bytes) -> AlertBatch:
    """
    Decode a webhook body into an AlertBatch.

    Raises:
        ParseError: if the body is not JSON or does not match the batch shape
    """
    try:
        return AlertBatch.model_validate_json(body)
    except ValidationError as e:
        raise ParseError(
            "; ".join(error["msg"] for error in e.errors()) or str(e)
        ) from e


def create_app(dispatcher: HealDispatcher) -> FastAPI:
    """Build the webhook application around ``dispatcher``."""
    app = FastAPI(
        title="Remediator",
        description="Restarts containers named by AlertManager alerts labelled severity=heal",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.dispatcher = dispatcher

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": _timestamp(),
            "service": "remediator",
            "version": __version__
        }

    @app.post("/webhook")
    async def receive_webhook(request: Request):
        """Receive an AlertManager webhook and restart the containers it asks to heal."""
        correlation_id = str(uuid.uuid4())

        batch = parse_batch(await request.body())

        logger.info(
            "Received AlertManager webhook",
            correlation_id=correlation_id,
            alert_count=len(batch.alerts),
            status=batch.status
        )

        await request.app.state.dispatcher.dispatch(batch, correlation_id=correlation_id)

        return Response(status_code=200)

    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError):
        """Reject malformed webhook payloads."""
        logger.warning(
            "Rejected malformed webhook payload",
            url=str(request.url),
            detail=exc.detail
        )

        return JSONResponse(
            status_code=400,
            content={
                "error": "Malformed webhook payload",
                "detail": exc.detail,
                "timestamp": _timestamp()
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        correlation_id = str(uuid.uuid4())

        logger.error(
            "Unhandled exception in webhook server",
            correlation_id=correlation_id,
            url=str(request.url),
            method=request.method,
            error=str(exc),
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "correlation_id": correlation_id,
                "timestamp": _timestamp()
            }
        )

    return app
