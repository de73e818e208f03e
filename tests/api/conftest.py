"""Fixtures for API tests: an in-memory container behind the FastAPI app."""

import pytest
from fastapi.testclient import TestClient

from docvault_access.api import AccessContainer, create_app
from docvault_access.config.settings import AccessSettings
from docvault_access.core.value_objects import FileId
from docvault_access.features.files.entities import FileRecord
from docvault_access.features.tenants.routers import get_current_principal


class PrincipalHolder:
    """Mutable slot the overridden principal dependency reads from."""

    def __init__(self):
        self.principal = None

    def __call__(self):
        return self.principal


@pytest.fixture
def access_settings():
    return AccessSettings(environment="testing", lock_password_bcrypt_rounds=4, audit_sink="memory")


@pytest.fixture
def container(access_settings):
    return AccessContainer.in_memory(settings=access_settings)


@pytest.fixture
def current():
    return PrincipalHolder()


@pytest.fixture
def app(container, current):
    app = create_app(container=container)
    app.dependency_overrides[get_current_principal] = current
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def api_file(container, tenant_id, department_id):
    """Factory that registers files in the container's store."""

    def _make(owner, tenant=None, **kwargs):
        record = FileRecord(
            id=FileId.generate(),
            tenant_id=tenant or tenant_id,
            owner_id=owner,
            department_id=kwargs.pop("department", department_id),
            **kwargs,
        )
        return container.file_store.add(record)

    return _make
