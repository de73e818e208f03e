"""Exception handlers for the FastAPI application.

Engine errors are rendered with ``create_error_response`` and the status
from the HTTP mapping, both of which use the error's public view so that
cross-tenant denials look exactly like missing resources.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import DocVaultError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the engine's exception handlers on an application."""

    def __init__(self, is_production: bool = True):
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        @app.exception_handler(DocVaultError)
        async def docvault_exception_handler(request: Request, exc: DocVaultError):
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
            else:
                logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
            return JSONResponse(status_code=status_code, content=create_error_response(exc))

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": {"code": "INTERNAL_ERROR", "message": message, "details": {}, "type": "InternalError"}},
            )


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers."""
    ExceptionHandlerRegistry(is_production=is_production).register_handlers(app)
