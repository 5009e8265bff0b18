"""Base utilities for repositories."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import CursorResult, Executable, Select, func, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection

from vault.core import metrics
from vault.core.exceptions import ConstraintError, QueryError
from vault.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


def to_id(value: int | str) -> int:
    """Convert an id given as string to int if needed.

    Args:
        value: Integer or numeric string id

    Returns:
        Integer id

    Raises:
        ValueError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid id: {value!r}")
    return int(value)


def to_id_list(values: Iterable[int | str]) -> list[int]:
    """Convert ids to a de-duplicated list, keeping the first-seen order."""
    return list(dict.fromkeys(to_id(value) for value in values))


@dataclass
class QueryResult(Generic[T]):
    """Rows returned by a read query.

    ``total_rows`` is the number of matching rows before any offset/limit was
    applied; it equals ``num_rows`` for unlimited queries.
    """

    rows: list[T] = field(default_factory=list)
    total_rows: int | None = None

    def __post_init__(self) -> None:
        if self.total_rows is None:
            self.total_rows = len(self.rows)

    @property
    def num_rows(self) -> int:
        """Number of rows held by this result."""
        return len(self.rows)

    def first(self) -> T | None:
        """Return the first row or None for an empty result."""
        return self.rows[0] if self.rows else None

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[T]:
        return iter(self.rows)


class BaseRepository:
    """Common query execution for repositories.

    Store errors are translated into :class:`ConstraintError` (integrity
    violations) or :class:`QueryError` (anything else). Writes run inside a
    SAVEPOINT, so a failed write leaves the caller's transaction usable and
    applies nothing.
    """

    name = "base"

    def __init__(self, connection: AsyncConnection):
        """Initialize repository.

        Args:
            connection: SQLAlchemy async connection.
        """
        self.conn = connection

    async def _execute(self, statement: Executable, query_type: str) -> CursorResult[Any]:
        with metrics.db_query_duration_seconds.labels(query_type=query_type).time():
            try:
                return await self.conn.execute(statement)
            except IntegrityError as e:
                metrics.repository_constraint_violations_total.labels(repository=self.name).inc()
                logger.warning(
                    "constraint_violation",
                    repository=self.name,
                    query_type=query_type,
                    error=str(e.orig),
                )
                raise ConstraintError(
                    f"Integrity constraint violated by {query_type}", query_type
                ) from e
            except DBAPIError as e:
                logger.error(
                    "query_failed",
                    repository=self.name,
                    query_type=query_type,
                    error=str(e.orig),
                    exc_info=True,
                )
                raise QueryError(f"Error while running {query_type}", query_type) from e

    async def _write(self, statement: Executable, query_type: str) -> int:
        """Run a write statement in a savepoint and return the affected row count."""
        async with self.conn.begin_nested():
            result = await self._execute(statement, query_type)
        return result.rowcount

    async def _fetch_all(
        self, statement: Executable, model: type[ModelT], query_type: str
    ) -> list[ModelT]:
        result = await self._execute(statement, query_type)
        return [model.model_validate(dict(row._mapping)) for row in result]

    async def _fetch_result(
        self, statement: Executable, model: type[ModelT], query_type: str
    ) -> QueryResult[ModelT]:
        return QueryResult(await self._fetch_all(statement, model, query_type))

    async def _fetch_page(
        self,
        statement: Select[Any],
        model: type[ModelT],
        query_type: str,
        limit_start: int = 0,
        limit_count: int | None = None,
    ) -> QueryResult[ModelT]:
        """Fetch one page of a query along with the total number of matches."""
        total = await self._scalar(
            select(func.count()).select_from(statement.order_by(None).subquery()),
            f"{query_type}_count",
        )
        if limit_start:
            statement = statement.offset(limit_start)
        if limit_count is not None:
            statement = statement.limit(limit_count)
        rows = await self._fetch_all(statement, model, query_type)
        return QueryResult(rows, total_rows=total or 0)

    async def _fetch_one(
        self, statement: Executable, model: type[ModelT], query_type: str
    ) -> ModelT | None:
        result = await self._execute(statement, query_type)
        row = result.first()
        return model.model_validate(dict(row._mapping)) if row is not None else None

    async def _scalar(self, statement: Executable, query_type: str) -> Any:
        result = await self._execute(statement, query_type)
        return result.scalar()
