import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from donation_portal.api import routers
from donation_portal.core.config import Settings, get_settings
from donation_portal.core.errors import ErrorKind, PortalError, TransactionFailedError
from donation_portal.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.kind is ErrorKind.BAD_REQUEST:
        logger.info(f"Bad request on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=400, content={"error": exc.message})

    if exc.kind is ErrorKind.TRANSACTION_FAILED and isinstance(exc, TransactionFailedError):
        logger.info(
            "Transaction failed",
            extra={"transaction_status": exc.status, "gateway_response": exc.gateway_response}
        )
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "status": exc.status, "gateway_response": exc.gateway_response}
        )

    # Gateway detail stays in the logs
    logger.error(
        f"Gateway error on {request.url.path}: {exc.message}",
        extra={"status_code": getattr(exc, "status_code", None)}
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Invalid input on {request.url.path}", extra={"errors": len(exc.errors())})
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Donation Portal API",
        root_path=settings.ROOT_PATH
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials="*" not in settings.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-paystack-signature"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Donation Portal API"}

    app.include_router(routers.router)
    return app


app = create_app(get_settings())

handler = Mangum(app)
