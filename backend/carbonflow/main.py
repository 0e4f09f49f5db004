"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from carbonflow import __version__
from carbonflow.core.config import get_settings
from carbonflow.core.database import create_db_engine, init_db
from carbonflow.routers import audit, compliance, health, navigation, portfolio, projects
from carbonflow.services.audit import AuditService
from carbonflow.services.persistence import DocumentRepository
from carbonflow.services.project_store import ProjectStore

settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/{settings.rate_limit_period} seconds"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store once per process and load the persisted snapshot."""
    engine = create_db_engine(settings.database_url)
    init_db(engine)

    audit_service = AuditService(engine)
    store = ProjectStore(
        DocumentRepository(engine, settings.store_document_key),
        settings=settings,
        audit=audit_service,
    )
    store.load()

    app.state.audit = audit_service
    app.state.store = store
    yield
    engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Environmental-credit project onboarding and compliance tracking",
    version=__version__,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(projects.router, prefix=settings.api_v1_prefix, tags=["projects"])
app.include_router(compliance.router, prefix=settings.api_v1_prefix, tags=["compliance"])
app.include_router(navigation.router, prefix=settings.api_v1_prefix, tags=["navigation"])
app.include_router(portfolio.router, prefix=settings.api_v1_prefix, tags=["portfolio"])
app.include_router(audit.router, prefix=settings.api_v1_prefix, tags=["audit"])
