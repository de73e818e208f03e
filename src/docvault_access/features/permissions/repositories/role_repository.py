"""AsyncPG-based role repository implementation.

Concrete implementation of the RoleRepository protocol using an asyncpg
connection pool. Role/grant writes that belong together run in a single
transaction.
"""

import logging
from typing import List, Mapping, Optional

import asyncpg

from ....config.constants import BaseRole, DatabaseTables, PermissionKey
from ....core.exceptions import ConflictError, DatabaseError
from ....core.value_objects import RoleId, TenantId
from ..entities import PermissionGrant, Role


logger = logging.getLogger(__name__)

_ROLE_COLUMNS = "id, tenant_id, name, description, base_role, is_system, created_at, updated_at"


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleRepository protocol."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    @property
    def _roles(self) -> str:
        return f"{self.schema}.{DatabaseTables.ROLES}"

    @property
    def _grants(self) -> str:
        return f"{self.schema}.{DatabaseTables.ROLE_PERMISSIONS}"

    @property
    def _users(self) -> str:
        return f"{self.schema}.{DatabaseTables.USERS}"

    def _build_role_from_row(self, row: asyncpg.Record) -> Role:
        """Build Role entity from database row."""
        return Role(
            id=RoleId(row["id"]),
            tenant_id=TenantId(row["tenant_id"]) if row["tenant_id"] else None,
            name=row["name"],
            description=row["description"],
            base_role=BaseRole.parse(row["base_role"]),
            is_system=row["is_system"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def get_by_id(self, role_id: RoleId) -> Optional[Role]:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_ROLE_COLUMNS} FROM {self._roles} WHERE id = $1",
                    role_id.value,
                )
            return self._build_role_from_row(row) if row else None
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to get role by id {role_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")

    async def find_by_name(self, name: str, tenant_id: Optional[TenantId]) -> Optional[Role]:
        # Tenant-owned rows sort before global rows (NULLS LAST).
        query = f"""
            SELECT {_ROLE_COLUMNS}
            FROM {self._roles}
            WHERE name = $1 AND (tenant_id = $2 OR tenant_id IS NULL)
            ORDER BY tenant_id NULLS LAST
            LIMIT 1
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, name, tenant_id.value if tenant_id else None)
            return self._build_role_from_row(row) if row else None
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to find role {name} for tenant {tenant_id}: {e}")
            raise DatabaseError(f"Failed to retrieve role: {e}")

    async def exists_in_scope(self, name: str, tenant_id: Optional[TenantId]) -> bool:
        query = f"""
            SELECT EXISTS(
                SELECT 1 FROM {self._roles}
                WHERE name = $1 AND tenant_id IS NOT DISTINCT FROM $2
            )
        """
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval(query, name, tenant_id.value if tenant_id else None)
        except asyncpg.PostgresError as e:
            raise DatabaseError(f"Failed to check role existence: {e}")

    async def list_roles(self, tenant_id: Optional[TenantId], include_global: bool = True) -> List[Role]:
        conditions = ["tenant_id IS NOT DISTINCT FROM $1"]
        if include_global and tenant_id is not None:
            conditions.append("tenant_id IS NULL")
        query = f"""
            SELECT {_ROLE_COLUMNS}
            FROM {self._roles}
            WHERE {' OR '.join(conditions)}
            ORDER BY is_system DESC, name
        """
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, tenant_id.value if tenant_id else None)
            return [self._build_role_from_row(row) for row in rows]
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to list roles for tenant {tenant_id}: {e}")
            raise DatabaseError(f"Failed to list roles: {e}")

    async def create(self, role: Role, grants: Optional[Mapping[PermissionKey, bool]] = None) -> Role:
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        f"""
                        INSERT INTO {self._roles}
                            (id, tenant_id, name, description, base_role, is_system, created_at)
                        VALUES ($1, $2, $3, $4, $5, $6, $7)
                        RETURNING {_ROLE_COLUMNS}
                        """,
                        role.id.value,
                        role.tenant_id.value if role.tenant_id else None,
                        role.name,
                        role.description,
                        role.base_role.value,
                        role.is_system,
                        role.created_at,
                    )
                    if grants:
                        await self._upsert_grants(conn, role.id, grants)
            logger.info(f"Created role {role.name} ({role.id})")
            return self._build_role_from_row(row)
        except asyncpg.UniqueViolationError:
            raise ConflictError(f"Role '{role.name}' already exists", details={"name": role.name})
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to create role {role.name}: {e}")
            raise DatabaseError(f"Failed to create role: {e}")

    async def update(self, role: Role) -> Role:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE {self._roles}
                    SET name = $2, description = $3, updated_at = NOW()
                    WHERE id = $1
                    RETURNING {_ROLE_COLUMNS}
                    """,
                    role.id.value,
                    role.name,
                    role.description,
                )
            if not row:
                raise DatabaseError(f"Role {role.id} disappeared during update")
            return self._build_role_from_row(row)
        except asyncpg.UniqueViolationError:
            raise ConflictError(f"Role '{role.name}' already exists", details={"name": role.name})
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to update role {role.id}: {e}")
            raise DatabaseError(f"Failed to update role: {e}")

    async def delete(self, role_id: RoleId) -> bool:
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(f"DELETE FROM {self._grants} WHERE role_id = $1", role_id.value)
                    result = await conn.execute(f"DELETE FROM {self._roles} WHERE id = $1", role_id.value)
            return result.endswith(" 1")
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to delete role {role_id}: {e}")
            raise DatabaseError(f"Failed to delete role: {e}")

    async def count_assignees(self, role: Role) -> int:
        if role.tenant_id is not None:
            query = f"SELECT COUNT(*) FROM {self._users} WHERE tenant_id = $1 AND role_name = $2"
            args = (role.tenant_id.value, role.name)
        else:
            # Users in tenants that shadow the name with their own role are not assignees.
            query = f"""
                SELECT COUNT(*) FROM {self._users} u
                WHERE u.role_name = $1
                  AND NOT EXISTS (
                      SELECT 1 FROM {self._roles} r
                      WHERE r.tenant_id = u.tenant_id AND r.name = $1
                  )
            """
            args = (role.name,)
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except asyncpg.PostgresError as e:
            raise DatabaseError(f"Failed to count role assignees: {e}")

    async def get_grants(self, role_id: RoleId) -> List[PermissionGrant]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT permission, granted FROM {self._grants} WHERE role_id = $1",
                    role_id.value,
                )
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to load grants for role {role_id}: {e}")
            raise DatabaseError(f"Failed to load permission grants: {e}")

        grants = []
        for row in rows:
            try:
                permission = PermissionKey(row["permission"])
            except ValueError:
                logger.warning(f"Ignoring unknown permission '{row['permission']}' on role {role_id}")
                continue
            grants.append(PermissionGrant(role_id=role_id, permission=permission, granted=row["granted"]))
        return grants

    async def _upsert_grants(
        self,
        conn: asyncpg.Connection,
        role_id: RoleId,
        grants: Mapping[PermissionKey, bool],
    ) -> None:
        await conn.executemany(
            f"""
            INSERT INTO {self._grants} (role_id, permission, granted)
            VALUES ($1, $2, $3)
            ON CONFLICT (role_id, permission) DO UPDATE SET granted = EXCLUDED.granted
            """,
            [(role_id.value, permission.value, granted) for permission, granted in grants.items()],
        )

    async def upsert_grants(self, role_id: RoleId, grants: Mapping[PermissionKey, bool]) -> None:
        if not grants:
            return
        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await self._upsert_grants(conn, role_id, grants)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to write grants for role {role_id}: {e}")
            raise DatabaseError(f"Failed to write permission grants: {e}")

    async def delete_grant(self, role_id: RoleId, permission: PermissionKey) -> bool:
        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    f"DELETE FROM {self._grants} WHERE role_id = $1 AND permission = $2",
                    role_id.value,
                    permission.value,
                )
            return result.endswith(" 1")
        except asyncpg.PostgresError as e:
            raise DatabaseError(f"Failed to reset permission grant: {e}")
