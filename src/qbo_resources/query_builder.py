"""Builders for QBO query-language statements.

QBO has no parameter binding, so statements are always assembled as text.
Everything that reaches a statement from caller input goes through this module:
column names and projections must be plain (optionally dotted) identifiers,
and values are quoted with backslash escaping of `\\` and `'`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping

_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)*$")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


class InvalidQueryError(ValueError):
    """Raised when a column, projection or value cannot be safely embedded."""


def validate_identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise InvalidQueryError(f"Invalid QBO identifier: {name!r}")
    return name


def validate_projection(projection: str | Iterable[str] | None) -> str:
    """Return a SELECT list; `None` and `"*"` both mean every column."""

    if projection is None:
        return "*"
    if isinstance(projection, str):
        if projection.strip() == "*":
            return "*"
        columns = [c.strip() for c in projection.split(",")]
    else:
        columns = [str(c).strip() for c in projection]
    if not columns:
        raise InvalidQueryError("Projection must name at least one column")
    return ", ".join(validate_identifier(c) for c in columns)


def _value_text(value: Any) -> str:
    if value is None:
        raise InvalidQueryError("None cannot be used as a filter value")
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (date, int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return value
    raise InvalidQueryError(f"Unsupported filter value type: {type(value).__name__}")


def quote_value(value: Any) -> str:
    """Render `value` as a QBO literal: booleans bare, everything else single-quoted."""

    # bool is an int subclass, so it must be handled before _value_text
    if isinstance(value, bool):
        return "true" if value else "false"
    text = _value_text(value)
    if _CONTROL_CHARS_RE.search(text):
        raise InvalidQueryError("Filter values may not contain control characters")
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_where_string(attributes: Mapping[str, Any]) -> str:
    """`{"a": "x", "b": "y"}` -> `WHERE a = 'x' AND b = 'y'` (input order kept)."""

    if not attributes:
        return ""
    conditions = [
        f"{validate_identifier(column)} = {quote_value(value)}"
        for column, value in attributes.items()
    ]
    return "WHERE " + " AND ".join(conditions)


def build_where_in_string(column: str, values: Iterable[Any]) -> str:
    """`("Name", ["A", "B"])` -> `WHERE Name IN ('A','B')`."""

    quoted = [quote_value(v) for v in values]
    if not quoted:
        raise InvalidQueryError("IN filter requires at least one value")
    return f"WHERE {validate_identifier(column)} IN ({','.join(quoted)})"


@dataclass(slots=True)
class QueryBuilder:
    """Compose a `SELECT ... FROM ... WHERE ...` statement from parameters.

    Example:
        QueryBuilder("Class").where(Name="Retail").where_in("Id", ["1", "2"]).build()
    """

    resource: str
    projection: str | Iterable[str] | None = None
    _conditions: list[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        validate_identifier(self.resource)

    def where(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any) -> "QueryBuilder":
        merged = dict(attributes or {})
        merged.update(kwargs)
        for column, value in merged.items():
            self._conditions.append(f"{validate_identifier(column)} = {quote_value(value)}")
        return self

    def where_in(self, column: str, values: Iterable[Any]) -> "QueryBuilder":
        self._conditions.append(build_where_in_string(column, values)[len("WHERE "):])
        return self

    def where_clause(self) -> str:
        if not self._conditions:
            return ""
        return "WHERE " + " AND ".join(self._conditions)

    def build(self) -> str:
        statement = f"SELECT {validate_projection(self.projection)} FROM {self.resource}"
        clause = self.where_clause()
        return f"{statement} {clause}" if clause else statement
