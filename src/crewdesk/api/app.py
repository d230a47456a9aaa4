"""FastAPI application factory."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from crewdesk.api.crm import router as crm_router
from crewdesk.api.users import router as users_router
from crewdesk.app_logging import configure_logging
from crewdesk.containers import AppContainer
from crewdesk.domain.errors import (
    AuthError,
    ErrorCode,
    NotFoundError,
    RemoteError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting crewdesk API (environment=%s, crm configured=%s)",
            container.settings.environment,
            container.crm_service.is_configured,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(users_router)
    app.include_router(crm_router)

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError) -> JSONResponse:
        status_code = (
            status.HTTP_409_CONFLICT
            if exc.reason is ErrorCode.EMAIL_ALREADY_EXISTS
            else status.HTTP_401_UNAUTHORIZED
        )
        return _error_response(status_code, exc.code, exc.message)

    @app.exception_handler(NotFoundError)
    async def not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc.code, exc.message)

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, exc.code, exc.message
        )

    @app.exception_handler(RemoteError)
    async def remote_error(request: Request, exc: RemoteError) -> JSONResponse:
        logger.warning("Upstream failure on %s: %s", request.url.path, exc)
        return _error_response(
            status.HTTP_502_BAD_GATEWAY,
            exc.code,
            exc.message,
            upstream_status=exc.status_code,
            upstream_detail=exc.detail,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/webhooks/hubspot")
    async def hubspot_webhook(
        request: Request,
        x_hubspot_signature_v3: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Verify and dispatch a HubSpot webhook delivery."""
        service = request.app.state.container.webhook_service
        if not service.client_secret:
            logger.error("Webhook received but no HubSpot client secret configured")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Webhook validation not configured",
            )
        body = await request.body()
        if not service.verify(body, x_hubspot_signature_v3):
            logger.warning("Rejected webhook with invalid signature")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature"
            )
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body"
            ) from exc
        effects = service.handle(payload)
        return {
            "status": "success",
            "message": "Webhook processed",
            "handled": sum(1 for effect in effects if effect.handled),
            "ignored": sum(1 for effect in effects if not effect.handled),
        }

    @app.post("/webhooks/hubspot/test")
    async def hubspot_webhook_test(request: Request) -> dict[str, object]:
        """Echo a payload back without verification."""
        payload = await request.json()
        logger.info("Test webhook received")
        return {
            "status": "success",
            "message": "Test webhook received",
            "received_data": payload,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    return app


def _error_response(
    status_code: int, code: ErrorCode, message: str, **extra: object
) -> JSONResponse:
    content: dict[str, object] = {"detail": message, "code": code.value}
    content.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=content)
