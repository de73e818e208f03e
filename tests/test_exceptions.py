"""Tests for the exception hierarchy and HTTP mapping."""

import pytest

from docvault_access.core.exceptions import (
    AlreadyLockedError,
    ComplianceLockedError,
    ConfigurationError,
    DocVaultError,
    FileNotFoundError,
    ForbiddenError,
    HttpStatusMapper,
    InsufficientRoleError,
    NotFoundError,
    NotLockedError,
    RoleInUseError,
    ScopeViolationError,
    ValidationError,
    WrongPasswordError,
    create_error_response,
    get_http_status_code,
    set_status_overrides,
)
from docvault_access.core.value_objects import FileId, TenantId


class TestHttpMapping:

    @pytest.mark.parametrize("error, status", [
        (NotFoundError("file"), 404),
        (FileNotFoundError(), 404),
        (ForbiddenError(), 403),
        (InsufficientRoleError(), 403),
        (WrongPasswordError(), 403),
        (ComplianceLockedError("mfa_required", "HIPAA", True), 403),
        (AlreadyLockedError(), 423),
        (NotLockedError(), 409),
        (RoleInUseError("Auditor", 2), 409),
        (ValidationError("bad"), 422),
        (ConfigurationError("missing"), 500),
        (DocVaultError("boom"), 500),
    ])
    def test_status_codes(self, error, status):
        assert get_http_status_code(error) == status

    def test_scope_violation_maps_like_not_found(self):
        assert get_http_status_code(ScopeViolationError("role")) == 404

    def test_overrides_by_class_name(self):
        try:
            set_status_overrides({"NotLockedError": 412})
            assert get_http_status_code(NotLockedError()) == 412
            assert get_http_status_code(AlreadyLockedError()) == 423
        finally:
            set_status_overrides({})

    def test_subclass_inherits_parent_status(self):
        class CustomForbidden(ForbiddenError):
            pass

        assert HttpStatusMapper().get_status_code(CustomForbidden()) == 403


class TestErrorResponse:

    def test_shape(self):
        file_id = FileId.generate()
        body = create_error_response(AlreadyLockedError(file_id))
        assert body["error"]["code"] == "ALREADY_LOCKED"
        assert body["error"]["details"] == {"file_id": str(file_id)}
        assert body["error"]["type"] == "AlreadyLockedError"

    def test_cross_tenant_denial_is_indistinguishable_from_absence(self):
        tenant = TenantId.generate()
        hidden = create_error_response(ScopeViolationError("file", tenant))
        missing = create_error_response(NotFoundError("file"))
        assert hidden == missing

    def test_not_found_hides_resource_id(self):
        file_id = FileId.generate()
        body = create_error_response(NotFoundError("file", file_id))
        assert str(file_id) not in str(body)

    def test_compliance_locked_details(self):
        body = create_error_response(ComplianceLockedError("mfa_required", "HIPAA", True))
        assert body["error"]["code"] == "COMPLIANCE_LOCKED"
        assert body["error"]["details"]["setting"] == "mfa_required"
        assert body["error"]["details"]["forced_value"] is True

    def test_validation_error_field(self):
        error = ValidationError("Unknown permission", field="permission")
        assert error.details == {"field": "permission"}
