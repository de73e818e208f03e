"""
Runtime configuration for docvault-access.

Settings are read from the environment (prefix ``DOCVAULT_``) and an optional
``.env`` file. Missing required configuration is the only fatal condition the
engine knows about; ``validate_startup`` reports it as ConfigurationError.
"""
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, PostgresDsn, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.exceptions import ConfigurationError
from .constants import CacheTTL, ComplianceMode


class AccessSettings(BaseSettings):
    """Settings for the authorization engine and its adapters."""

    model_config = SettingsConfigDict(
        env_prefix="DOCVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Core Application Settings
    app_name: str = Field(default="docvault-access")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Persistence
    database_url: Optional[PostgresDsn] = Field(default=None)
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)

    # Role permission cache
    permission_cache_backend: Literal["memory", "redis"] = Field(default="memory")
    permission_cache_ttl: int = Field(default=CacheTTL.PERMISSIONS_SHORT, ge=1, le=CacheTTL.PERMISSIONS_LONG)
    redis_url: Optional[RedisDsn] = Field(default=None)
    cache_key_prefix: str = Field(default="docvault")

    # File locks
    lock_password_bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    lock_password_min_length: int = Field(default=4, ge=1)

    # Audit
    audit_sink: Literal["logging", "memory"] = Field(default="logging")

    # Compliance
    default_compliance_mode: str = Field(default=ComplianceMode.STANDARD.value)

    # API
    api_prefix: str = Field(default="/api/v1")
    cors_origins: List[str] = Field(default=[])

    @field_validator("default_compliance_mode")
    @classmethod
    def validate_compliance_mode(cls, v: str) -> str:
        return ComplianceMode.parse(v).value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment.lower() == "testing"

    @property
    def compliance_mode(self) -> ComplianceMode:
        return ComplianceMode.parse(self.default_compliance_mode)

    def validate_startup(self) -> None:
        """Fail fast on configuration the engine cannot run without."""
        missing: List[str] = []

        if self.permission_cache_backend == "redis" and self.redis_url is None:
            missing.append("DOCVAULT_REDIS_URL")

        if self.is_production and self.database_url is None:
            missing.append("DOCVAULT_DATABASE_URL")

        if self.is_production and self.audit_sink == "memory":
            raise ConfigurationError(
                "In-memory audit sink is not allowed in production",
                details={"audit_sink": self.audit_sink},
            )

        if self.db_pool_min_size > self.db_pool_max_size:
            raise ConfigurationError(
                "DOCVAULT_DB_POOL_MIN_SIZE cannot exceed DOCVAULT_DB_POOL_MAX_SIZE",
                details={"min": self.db_pool_min_size, "max": self.db_pool_max_size},
            )

        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                details={"missing": missing},
            )

    def get_cache_key_prefix(self) -> str:
        return f"{self.cache_key_prefix}:{self.environment}:"

    def get_service_specific_config(self) -> Dict[str, Any]:
        return {
            "permission_cache_backend": self.permission_cache_backend,
            "permission_cache_ttl": self.permission_cache_ttl,
            "audit_sink": self.audit_sink,
            "default_compliance_mode": self.default_compliance_mode,
        }


@lru_cache()
def get_settings() -> AccessSettings:
    """Get cached settings instance."""
    return AccessSettings()
