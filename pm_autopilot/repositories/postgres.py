"""
PostgreSQL repository backed by an asyncpg connection pool.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import asyncpg

from pm_autopilot.core.exceptions import DatabaseError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.base import utc_now
from pm_autopilot.repositories.base import BaseRepository, T

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def create_schema(pool: Any) -> None:
    """Create any missing tables from the packaged schema."""
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    logger.info("Database schema ensured")


class PostgresRepository(BaseRepository[T]):
    """
    PostgreSQL repository for production.

    Subclasses name the table and model; columns mirror the model's
    declared fields. Columns listed in ``json_columns`` are stored as JSONB.
    """

    model_type: type[T]
    table: str
    json_columns: frozenset[str] = frozenset()

    def __init__(self, connection_pool: Any) -> None:
        """
        Initialize with a database connection pool.

        Args:
            connection_pool: asyncpg connection pool
        """
        self.pool = connection_pool
        self.columns = list(self.model_type.model_fields)

    async def get(self, id: str) -> Optional[T]:
        """Get a record by ID."""
        row = await self._fetchrow(f"SELECT * FROM {self.table} WHERE id = $1", id)
        return self._row_to_model(row) if row else None

    async def save(self, entity: T) -> T:
        """Insert or replace a record."""
        entity.touch()
        values = self._model_to_values(entity)

        placeholders = ", ".join(f"${i}" for i in range(1, len(self.columns) + 1))
        updates = ", ".join(
            f"{col} = EXCLUDED.{col}" for col in self.columns if col not in ("id", "created_at")
        )
        query = (
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) "
            f"VALUES ({placeholders}) "
            f"ON CONFLICT (id) DO UPDATE SET {updates}"
        )
        await self._execute(query, *values)
        return entity

    async def update_fields(self, id: str, **fields: Any) -> Optional[T]:
        """Update individual fields and return the stored record."""
        fields = {**fields, "updated_at": utc_now()}
        self._check_columns(fields)

        assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(fields, start=1))
        params = [self._encode(col, value) for col, value in fields.items()]
        query = (
            f"UPDATE {self.table} SET {assignments} "
            f"WHERE id = ${len(params) + 1} RETURNING *"
        )
        row = await self._fetchrow(query, *params, id)
        return self._row_to_model(row) if row else None

    async def delete(self, id: str) -> bool:
        """Delete a record by ID."""
        result = await self._execute(f"DELETE FROM {self.table} WHERE id = $1", id)
        return result == "DELETE 1"

    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[T]:
        """List records with optional equality filters."""
        where, params = self._where(filters)
        query = (
            f"SELECT * FROM {self.table}{where} ORDER BY created_at DESC "
            f"LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}"
        )
        rows = await self._fetch(query, *params, limit, offset)
        return [self._row_to_model(row) for row in rows]

    async def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """Count records with optional equality filters."""
        where, params = self._where(filters)
        return await self._fetchval(f"SELECT COUNT(*) FROM {self.table}{where}", *params)

    async def exists(self, id: str) -> bool:
        """Check if a record exists."""
        return await self._fetchval(
            f"SELECT EXISTS(SELECT 1 FROM {self.table} WHERE id = $1)", id
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _where(self, filters: Optional[dict[str, Any]]) -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        self._check_columns(filters)

        clauses: list[str] = []
        params: list[Any] = []
        for col, value in filters.items():
            if value is None:
                clauses.append(f"{col} IS NULL")
            else:
                params.append(self._encode(col, value))
                clauses.append(f"{col} = ${len(params)}")
        return " WHERE " + " AND ".join(clauses), params

    def _check_columns(self, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(self.columns)
        if unknown:
            raise ValueError(f"Unknown columns for {self.table}: {sorted(unknown)}")

    def _encode(self, col: str, value: Any) -> Any:
        if col in self.json_columns:
            return json.dumps(value)
        if isinstance(value, Enum):
            return value.value
        return value

    def _model_to_values(self, entity: T) -> list[Any]:
        data = entity.model_dump(include=set(self.columns))
        return [self._encode(col, data[col]) for col in self.columns]

    def _row_to_model(self, row: Any) -> T:
        data = dict(row)
        for col in self.json_columns:
            if isinstance(data.get(col), str):
                data[col] = json.loads(data[col])
        return self.model_type.model_validate(data)

    def _connection(self) -> Any:
        return self.pool.acquire()

    async def _fetchrow(self, query: str, *params: Any) -> Any:
        try:
            async with self._connection() as conn:
                return await conn.fetchrow(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Database query failed", table=self.table, error=str(e))
            raise DatabaseError(str(e), details={"table": self.table}) from e

    async def _fetchval(self, query: str, *params: Any) -> Any:
        try:
            async with self._connection() as conn:
                return await conn.fetchval(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Database query failed", table=self.table, error=str(e))
            raise DatabaseError(str(e), details={"table": self.table}) from e

    async def _fetch(self, query: str, *params: Any) -> list[Any]:
        try:
            async with self._connection() as conn:
                return await conn.fetch(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Database query failed", table=self.table, error=str(e))
            raise DatabaseError(str(e), details={"table": self.table}) from e

    async def _execute(self, query: str, *params: Any) -> str:
        try:
            async with self._connection() as conn:
                return await conn.execute(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error("Database statement failed", table=self.table, error=str(e))
            raise DatabaseError(str(e), details={"table": self.table}) from e
