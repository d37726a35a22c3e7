import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from company_service.config import Settings, get_settings
from company_service.container import ServiceContainer
from company_service.errors import CompanyServiceError, ValidationError
from company_service.routes import admin as admin_routes
from company_service.routes import auth as auth_routes
from company_service.routes import profile as profile_routes

logger = logging.getLogger(__name__)

API_PREFIX = "/api/company"


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", ValidationError.message)
    return f"{field}: {msg}" if field else msg


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(CompanyServiceError)
    async def domain_error(request: Request, exc: CompanyServiceError):
        logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        logger.info("%s %s -> ValidationError: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=ValidationError.status_code, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    settings = settings or (container.settings if container else get_settings())
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.container is None
        if owned:
            app.state.container = ServiceContainer.from_settings(settings)
            await app.state.container.startup()
        try:
            yield
        finally:
            if owned:
                await app.state.container.shutdown()
                app.state.container = None

    app = FastAPI(title=settings.app_name, version="1.0.0", openapi_url="/openapi.json", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("[%s] %s -> %s", request.method, request.url.path, response.status_code)
        return response

    _register_error_handlers(app)

    app.include_router(auth_routes.router, prefix=API_PREFIX, tags=["auth"])
    app.include_router(profile_routes.router, prefix=API_PREFIX, tags=["profile"])
    app.include_router(admin_routes.router, prefix=API_PREFIX, tags=["admin"])

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "message": "Company Service is running!"}

    return app
