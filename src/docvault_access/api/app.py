"""FastAPI application factory for docvault-access."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from ..__version__ import __version__
from ..config.settings import AccessSettings, get_settings
from ..features.access.services import AccessEngine
from ..features.compliance.routers import compliance_router, get_settings_service
from ..features.compliance.services import TenantSettingsService
from ..features.files.routers import file_router, get_access_engine
from ..features.permissions.routers import get_role_catalog, role_router
from ..features.permissions.services import RoleCatalog
from .container import AccessContainer
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)


def _container(request: Request) -> AccessContainer:
    return request.app.state.container


def _engine(request: Request) -> AccessEngine:
    return _container(request).engine


def _role_catalog(request: Request) -> RoleCatalog:
    return _container(request).role_catalog


def _settings_service(request: Request) -> TenantSettingsService:
    return _container(request).settings_service


def create_app(
    settings: Optional[AccessSettings] = None,
    container: Optional[AccessContainer] = None,
) -> FastAPI:
    """Create the API.

    When ``container`` is given it is used as-is; otherwise one is built from
    settings during startup and closed on shutdown. The host application
    still has to override ``get_current_principal``.
    """
    settings = settings or (container.settings if container else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "container", None) is None:
            owned = await AccessContainer.from_settings(settings)
            app.state.container = owned
        logger.info(f"{settings.app_name} started ({settings.environment})")
        yield
        if owned is not None:
            await owned.close()

    app = FastAPI(
        title="DocVault Access API",
        version=__version__,
        description="Authorization and file-lock engine for multi-tenant document management",
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app, is_production=settings.is_production)

    app.dependency_overrides[get_access_engine] = _engine
    app.dependency_overrides[get_role_catalog] = _role_catalog
    app.dependency_overrides[get_settings_service] = _settings_service

    app.include_router(file_router, prefix=settings.api_prefix)
    app.include_router(role_router, prefix=settings.api_prefix)
    app.include_router(compliance_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app
