from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.webhook_delivery_channel import WebhookDeliveryChannel
from src.api.utils.jwt import verify_jwt
from src.app.services.checkin_qr_codec import CheckinQrCodec
from src.app.services.schema_capabilities import SchemaCapabilities
from src.app.services.unit_of_work import UnitOfWork


def enable_sqlite_immediate_transactions(async_engine: AsyncEngine) -> AsyncEngine:
    """
    Make every SQLite transaction take the write lock up front.

    pysqlite defers BEGIN until the first write, so two sessions can both read
    "no check-in yet" before either inserts. Emitting BEGIN IMMEDIATE ourselves
    serializes writers the way SELECT ... FOR UPDATE does on PostgreSQL.
    Other dialects are returned untouched.
    """
    if async_engine.dialect.name != "sqlite":
        return async_engine

    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return async_engine


engine = enable_sqlite_immediate_transactions(
    create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


def get_capabilities(request: Request) -> SchemaCapabilities:
    """Flags detected at startup; every capability when startup did not run."""
    return getattr(request.app.state, "capabilities", None) or SchemaCapabilities.full()


async def get_unit_of_work(capabilities: SchemaCapabilities = Depends(get_capabilities)):
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session, capabilities)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify the operator JWT from the Authorization header.

    Returns:
        Decoded JWT payload containing user_id and tenant_id (the wedding)

    Raises:
        HTTPException: 401 if token is invalid, expired or lacks the claims
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or not payload.get("tenant_id") or not payload.get("user_id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        UUID(str(payload["tenant_id"]))
        UUID(str(payload["user_id"]))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims",
        )

    return payload


def get_qr_codec() -> CheckinQrCodec:
    return CheckinQrCodec(ApplicationConfig.QR_ENCRYPTION_KEY, ApplicationConfig.QR_PREFIX)


def get_delivery_channel(uow: UnitOfWork = Depends(get_unit_of_work)) -> WebhookDeliveryChannel:
    # Same per-request unit of work as the use case, so message rows commit with it
    return WebhookDeliveryChannel(
        uow,
        webhook_urls=ApplicationConfig.WEBHOOK_URLS,
        public_site_url=ApplicationConfig.PUBLIC_SITE_URL,
        timeout=ApplicationConfig.DELIVERY_TIMEOUT_SECONDS,
    )
