"""Pytest configuration and fixtures for docvault-access tests."""

from datetime import datetime, timezone

import pytest

from docvault_access.config.constants import BaseRole, UserStatus, Visibility
from docvault_access.core.value_objects import DepartmentId, FileId, TenantId, UserId
from docvault_access.features.access.services import AccessEngine
from docvault_access.features.audit.services import AuditEmitter, InMemoryAuditSink
from docvault_access.features.compliance.repositories import InMemoryComplianceRepository
from docvault_access.features.compliance.services import CompliancePolicyOverlay, TenantSettingsService
from docvault_access.features.files.entities import FileRecord
from docvault_access.features.files.repositories import InMemoryFileLockStore
from docvault_access.features.files.services import FileAccessEvaluator, LockManager, LockPasswordHasher
from docvault_access.features.permissions.cache import MemoryPermissionCache
from docvault_access.features.permissions.repositories import InMemoryRoleRepository
from docvault_access.features.permissions.services import RoleCatalog
from docvault_access.features.tenants.entities import PrincipalContext

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    """Timestamp returned by every injected clock."""
    return FIXED_NOW


@pytest.fixture
def tenant_id():
    """Home tenant of the sample principals."""
    return TenantId.generate()


@pytest.fixture
def other_tenant_id():
    """A tenant none of the sample principals belong to."""
    return TenantId.generate()


@pytest.fixture
def department_id():
    return DepartmentId.generate()


@pytest.fixture
def other_department_id():
    return DepartmentId.generate()


@pytest.fixture
def make_principal(tenant_id, department_id):
    """Factory for principals; role name defaults to the base tier's system role."""

    def _make(
        base_role=BaseRole.EMPLOYEE,
        role_name=None,
        tenant=None,
        department=department_id,
        allowed_departments=(),
        allowed_tenants=(),
        status=UserStatus.ACTIVE,
        user_id=None,
    ):
        return PrincipalContext(
            user_id=user_id or UserId.generate(),
            tenant_id=tenant or tenant_id,
            role_name=role_name or base_role.value,
            base_role=base_role,
            department_id=department,
            allowed_department_ids=allowed_departments,
            allowed_tenant_ids=allowed_tenants,
            status=status,
        )

    return _make


@pytest.fixture
def employee(make_principal):
    return make_principal(BaseRole.EMPLOYEE)


@pytest.fixture
def manager(make_principal):
    return make_principal(BaseRole.MANAGER)


@pytest.fixture
def admin(make_principal):
    return make_principal(BaseRole.ADMIN)


@pytest.fixture
def super_admin(make_principal, other_tenant_id):
    """SuperAdmin whose home tenant is not the sample tenant."""
    return make_principal(BaseRole.SUPER_ADMIN, tenant=other_tenant_id, department=None)


@pytest.fixture
def role_repository():
    return InMemoryRoleRepository()


@pytest.fixture
def permission_cache():
    return MemoryPermissionCache(default_ttl=30)


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def audit(audit_sink):
    return AuditEmitter(audit_sink, clock=lambda: FIXED_NOW)


@pytest.fixture
def role_catalog(role_repository, permission_cache, audit):
    return RoleCatalog(role_repository, permission_cache, audit=audit)


@pytest.fixture
def evaluator():
    return FileAccessEvaluator()


@pytest.fixture
def hasher():
    """Lowest bcrypt cost to keep the suite fast."""
    return LockPasswordHasher(rounds=4, min_length=4)


@pytest.fixture
def file_store():
    return InMemoryFileLockStore()


@pytest.fixture
def lock_manager(file_store, evaluator, hasher, audit):
    return LockManager(file_store, evaluator, hasher, audit, clock=lambda: FIXED_NOW)


@pytest.fixture
def compliance_repository():
    return InMemoryComplianceRepository()


@pytest.fixture
def overlay():
    return CompliancePolicyOverlay()


@pytest.fixture
def settings_service(compliance_repository, overlay, role_catalog, audit):
    return TenantSettingsService(compliance_repository, overlay, role_catalog, audit)


@pytest.fixture
def engine(role_catalog, evaluator, lock_manager, settings_service, audit):
    return AccessEngine(role_catalog, evaluator, lock_manager, settings_service, audit)


@pytest.fixture
def make_file(file_store, tenant_id, department_id):
    """Factory for file records, registered in the in-memory store."""

    def _make(owner, tenant=None, department=department_id, visibility=Visibility.DEPARTMENT, **kwargs):
        record = FileRecord(
            id=kwargs.pop("id", None) or FileId.generate(),
            tenant_id=tenant or tenant_id,
            owner_id=owner.user_id if isinstance(owner, PrincipalContext) else owner,
            department_id=department,
            visibility=visibility,
            **kwargs,
        )
        return file_store.add(record)

    return _make
