from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


def make_server_error_handler(expose_details: bool):
    async def handle_server_error(request: Request, exc: ServerError):
        message = exc.base_error.message if expose_details else "Internal server error"
        error_dict = {"code": exc.base_error.code, "message": message}
        logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
        )

    return handle_server_error


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)

    app = FastAPI(title="SMS Audit API", version=ApplicationConfig.APP_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from sms_audit.api.routes import audit, auth, health_check

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(audit.router, prefix=ApplicationConfig.API_PREFIX, tags=["Audit"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(
        ServerError,
        make_server_error_handler(ApplicationConfig.ENVIRONMENT == "development"),
    )

    return app
