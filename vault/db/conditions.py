"""Composable query conditions.

Callers that need to restrict a repository query (linked accounts, per-user
visibility) describe the restriction with predicates instead of SQL text.
Field names are resolved against the columns of the queried table and every
value is sent as a bound parameter.

Example:
    >>> visible = QueryCondition(operator="or")
    >>> visible = visible.add_filter(Eq("is_private", False)).add_filter(Eq("user_id", 3))
    >>> condition = QueryCondition().add_filter(Eq("parent_id", 1)).add_filter(visible)
    >>> condition.has_filters()
    True
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from sqlalchemy import ColumnElement, and_, or_

from vault.core.exceptions import QueryError

ColumnMap = Mapping[str, ColumnElement[Any]]


def _resolve(columns: ColumnMap, name: str) -> ColumnElement[Any]:
    try:
        return columns[name]
    except KeyError:
        raise QueryError(f"Unknown filter field '{name}'", query_type="condition") from None


class Predicate(ABC):
    """A single boolean condition over one column."""

    @abstractmethod
    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        """Build the SQLAlchemy clause for this predicate."""


@dataclass(frozen=True)
class Eq(Predicate):
    """``field = value``."""

    field: str
    value: Any

    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        return _resolve(columns, self.field) == self.value


@dataclass(frozen=True)
class In(Predicate):
    """``field IN (values)``. An empty value list matches nothing."""

    field: str
    values: tuple[Any, ...]

    def __init__(self, field: str, values: Iterable[Any]):
        object.__setattr__(self, "field", field)
        object.__setattr__(self, "values", tuple(values))

    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        return _resolve(columns, self.field).in_(self.values)


@dataclass(frozen=True)
class Range(Predicate):
    """``lower <= field <= upper``; either bound may be omitted."""

    field: str
    lower: Any = None
    upper: Any = None

    def __post_init__(self) -> None:
        if self.lower is None and self.upper is None:
            raise QueryError(f"Range on '{self.field}' needs at least one bound", "condition")

    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        column = _resolve(columns, self.field)
        clauses = []
        if self.lower is not None:
            clauses.append(column >= self.lower)
        if self.upper is not None:
            clauses.append(column <= self.upper)
        return and_(*clauses)


@dataclass(frozen=True)
class IsNull(Predicate):
    """``field IS NULL`` (or ``IS NOT NULL`` when negated)."""

    field: str
    negate: bool = False

    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        column = _resolve(columns, self.field)
        return column.is_not(None) if self.negate else column.is_(None)


@dataclass
class QueryCondition(Predicate):
    """A group of predicates joined with AND or OR.

    Groups can be nested as predicates of other groups.
    """

    operator: Literal["and", "or"] = "and"
    filters: list[Predicate] = field(default_factory=list)

    def add_filter(self, predicate: Predicate) -> "QueryCondition":
        """Append a predicate and return self for chaining."""
        self.filters.append(predicate)
        return self

    def has_filters(self) -> bool:
        """Return True if at least one predicate was added."""
        return bool(self.filters)

    def to_clause(self, columns: ColumnMap) -> ColumnElement[bool]:
        if not self.filters:
            raise QueryError("Query condition has no filters", query_type="condition")
        clauses = [predicate.to_clause(columns) for predicate in self.filters]
        return and_(*clauses) if self.operator == "and" else or_(*clauses)
