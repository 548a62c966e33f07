import ssl
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette import status

from config import ApplicationConfig
from libs.result import Error
from sms_audit.adapter.services.unit_of_work import SqlAlchemyUnitOfWork, unit_of_work_factory
from sms_audit.api.error import ClientError
from sms_audit.api.utils.jwt import verify_jwt
from sms_audit.app.services.audit_recorder import AuditRecorder
from sms_audit.app.services.event_normalizer import RequestContext


def _connect_args(config) -> dict:
    # TLS trust material only applies to the PostgreSQL driver
    if config.DB_SSL_ROOT_CERT and config.DB_URI.startswith("postgresql"):
        return {"ssl": ssl.create_default_context(cafile=config.DB_SSL_ROOT_CERT)}
    return {}


engine = create_async_engine(
    ApplicationConfig.DB_URI,
    echo=False,
    future=True,
    connect_args=_connect_args(ApplicationConfig),
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def build_audit_recorder(session_factory: sessionmaker, config=ApplicationConfig) -> AuditRecorder:
    return AuditRecorder(
        unit_of_work_factory(session_factory),
        app_version=config.APP_VERSION,
        server_name=config.SERVER_NAME or None,
        admin_role_markers=config.ADMIN_ROLE_MARKERS,
    )


_audit_recorder = build_audit_recorder(AsyncSessionLocal)


def get_audit_recorder() -> AuditRecorder:
    return _audit_recorder


def get_request_context(request: Request) -> RequestContext:
    return RequestContext.from_request(request)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing sub, roles, sid

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Bearer token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload
