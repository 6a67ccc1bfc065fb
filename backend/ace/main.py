"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ace import __version__
from ace.api.v1 import assets, auth, collaboration, datasets, excel_schema, models, templates
from ace.collab.hub import CollaborationHub
from ace.core.config import settings
from ace.core.errors import AceError, AuthError, RecordValidationError
from ace.core.logging import get_logger, setup_logging
from ace.core.security import TokenStore
from ace.core.tracing import setup_tracing
from ace.inference.generator import SchemaGenerator
from ace.integrations.ckan import CkanAdapter
from ace.integrations.orion import OrionPublisher
from ace.stores.assets import AssetStore
from ace.stores.models import ModelStore
from ace.templates.registry import TemplateRegistry

logger = get_logger(__name__)

API_PREFIX = "/v1"
SERVICE_NAME = "Atlas Compliance Engine (ACE) Prototype"

# Pydantic error locations start with where the value came from
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.log_level)
    tracing = setup_tracing()
    startup_logger = get_logger("startup")
    startup_logger.info(
        "Application starting",
        env=settings.APP_ENV,
        templates=len(app.state.registry),
        ckan_configured=bool(settings.CKAN_BASE_URL),
        orion_configured=bool(settings.ORION_LD_URL),
        tracing=tracing,
    )
    yield
    startup_logger.info("Application shutting down")


# ─── Error handlers ────────────────────────────────────

def _format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    if len(loc) > 1 and loc[0] in _LOCATION_ROOTS:
        loc = loc[1:]
    return f"{'.'.join(loc)}: {error.get('msg', 'invalid value')}"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("Request body rejected", path=request.url.path, errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def ace_error_handler(request: Request, exc: AceError) -> JSONResponse:
    if isinstance(exc, RecordValidationError):
        return JSONResponse(status_code=exc.status_code, content={"errors": exc.messages})
    if isinstance(exc, AuthError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code})

    log = logger.error if exc.status_code >= 500 else logger.info
    log("Request failed", path=request.url.path, error=exc.message, **exc.details)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Error", "detail": str(exc)},
    )


# ─── Application factory ───────────────────────────────

def create_app() -> FastAPI:
    """Build the application with fresh in-memory stores on ``app.state``."""
    app = FastAPI(
        title="Atlas Compliance Engine",
        description="GIF-compliant CMS backend: templates, validated records, CKAN and Orion-LD",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    registry = TemplateRegistry.with_builtins()
    app.state.registry = registry
    app.state.models = ModelStore()
    app.state.assets = AssetStore()
    app.state.tokens = TokenStore.from_settings()
    app.state.ckan = CkanAdapter()
    app.state.orion = OrionPublisher()
    app.state.schema_generator = SchemaGenerator()
    app.state.hub = CollaborationHub()

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AceError, ace_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(collaboration.router)
    app.include_router(templates.router, prefix=API_PREFIX)
    app.include_router(models.router, prefix=API_PREFIX)
    app.include_router(datasets.router, prefix=API_PREFIX)
    app.include_router(assets.router, prefix=API_PREFIX)
    app.include_router(excel_schema.router, prefix=API_PREFIX)

    @app.get("/status", tags=["Health"])
    async def service_status() -> dict[str, str]:
        """Public service banner."""
        return {"service": SERVICE_NAME, "oauth": "oauth/token", "api": API_PREFIX}

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Public health-check endpoint."""
        return {"status": "ok", "env": settings.APP_ENV}

    return app


app = create_app()
