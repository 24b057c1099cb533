from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from config import setup_logging
from src.adapter.services.schema_inspector import detect_schema_capabilities
from src.app.services.schema_capabilities import SchemaCapabilities
from src.depends import engine
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.CREATE_TABLES_ON_STARTUP:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        if ApplicationConfig.DETECT_SCHEMA_CAPABILITIES:
            app.state.capabilities = await detect_schema_capabilities(engine)
        else:
            app.state.capabilities = SchemaCapabilities.full()
        yield
        await engine.dispose()

    app = FastAPI(title="Guest RSVP & Check-in API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import checkins, events, health_check, incidents, invites, rsvp

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(invites.router, prefix=prefix, tags=["Invites"])
    app.include_router(rsvp.router, prefix=prefix, tags=["RSVP"])
    app.include_router(checkins.router, prefix=prefix, tags=["Check-ins"])
    app.include_router(incidents.router, prefix=prefix, tags=["Incidents"])
    app.include_router(events.router, prefix=prefix, tags=["Events"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
