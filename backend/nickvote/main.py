from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from nickvote.config import Settings, settings as default_settings
from nickvote.db import Database
from nickvote.errors import NickVoteError
from nickvote.logging_setup import configure_logging
from nickvote.routes.system import router as system_router
from nickvote.routes.auth import router as auth_router
from nickvote.routes.students import router as students_router
from nickvote.routes.votes import router as votes_router
from nickvote.routes.admin import router as admin_router
import structlog

configure_logging()
log = structlog.get_logger()

def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{where}: {first.get('msg')}" if where else str(first.get("msg"))

def _error_body(message: str) -> dict:
    # "error" is what browser clients read; "detail" matches FastAPI's own errors
    return {"error": message, "detail": message}

def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or default_settings
    db = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha)
        yield
        # Shutdown
        await db.dispose()
        log.info("shutdown")

    app = FastAPI(
        title=f"{settings.app_display_name} API",
        version=settings.app_version,
        lifespan=lifespan,
        description=f"{settings.app_display_name} API for classmate nickname voting",
    )
    app.state.db = db
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(system_router)
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(votes_router)
    app.include_router(admin_router)

    @app.exception_handler(NickVoteError)
    async def nickvote_error(request: Request, exc: NickVoteError):
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_error_body(_validation_message(exc)))

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        log.error("database_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content=_error_body("Internal server error"))

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        structlog.contextvars.bind_contextvars(request_id=rid)
        try:
            response: Response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers["X-Request-ID"] = rid
        return response

    return app

def run():
    import uvicorn
    s = default_settings
    uvicorn.run("nickvote.main:create_app", factory=True, host=s.api_host, port=s.api_port)
