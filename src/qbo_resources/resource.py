"""Generic QuickBooks resource adapter.

Each public operation is a single call against the connection's client made
through `_request`, which is the only place a call is classified as success or
failure. Faults never propagate from here: they become a failure value
(`False`, `None` or `[]` depending on the operation) and are kept on the adapter
for `has_error` / `get_error` / `get_error_code`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

from .builders import EntityBuilder, InvalidResourceError, get_builder
from .connection import QBOConnection
from .faults import QBOFault, parse_fault_message
from .query_builder import (
    build_where_in_string,
    build_where_string,
    validate_identifier,
    validate_projection,
)

logger = logging.getLogger(__name__)


class ResourceNotFoundError(LookupError):
    pass


@dataclass(frozen=True, slots=True)
class ResourceDefinition:
    name: str
    builder: EntityBuilder


@dataclass(frozen=True, slots=True)
class QBOResult:
    ok: bool
    payload: Any = None
    fault: QBOFault | None = None

    @property
    def error_message(self) -> str | None:
        return parse_fault_message(self.fault.response_body) if self.fault else None

    @property
    def error_code(self) -> int | None:
        return self.fault.http_status_code if self.fault else None


class QuickBooksResource:
    """Adapter for one QBO entity type.

    Subclasses fix `name` and `builder`; otherwise pass a `ResourceDefinition`.
    """

    name: str | None = None
    builder: EntityBuilder | None = None

    def __init__(self, connection: QBOConnection, resource: ResourceDefinition | None = None) -> None:
        name, builder = type(self).name, type(self).builder
        if name is None or builder is None:
            if resource is None or not resource.name or resource.builder is None:
                raise InvalidResourceError("The provided QuickBooks resource is invalid.")
            name, builder = resource.name, resource.builder

        self._name: str = validate_identifier(name)
        self._builder: EntityBuilder = builder
        self._connection = connection
        self.last_error: QBOFault | None = None
        self.last_result: QBOResult | None = None

    @property
    def resource_name(self) -> str:
        return self._name

    @property
    def resource_builder(self) -> EntityBuilder:
        return self._builder

    def create(self, attributes: Mapping[str, Any]) -> int | Literal[False]:
        entity = self._builder.build_create(attributes)
        result = self._request("add", self._name, entity)
        if not result.ok:
            return False
        return int(result.payload["Id"])

    def update(self, id: str | int, attributes: Mapping[str, Any]) -> str | Literal[False]:
        existing = self.find(id)
        if not existing:
            raise ResourceNotFoundError(f"The requested {self._name} could not be found.")

        entity = self._builder.build_update(existing, attributes)
        result = self._request("update", self._name, entity)
        if not result.ok:
            return False
        return result.payload["Id"]

    def find(self, id: str | int) -> dict[str, Any] | None:
        result = self._request("find_by_id", self._name, id)
        return result.payload if result.ok and result.payload else None

    def find_by(self, key: str, value: Any) -> dict[str, Any] | None:
        rows = self.query_where({key: value}, 0, 1)
        return rows[0] if rows else None

    def query(
        self,
        filter_clause: str | None = None,
        offset: int | None = None,
        limit: int | None = None,
        projection: str | Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Run `SELECT <projection> FROM <name> <filter_clause>`.

        `filter_clause` is embedded verbatim; build it with `query_where`,
        `query_where_in` or `QueryBuilder.where_clause()` rather than by hand.
        `offset` is 0-based.
        """

        statement = f"SELECT {validate_projection(projection)} FROM {self._name}"
        if filter_clause:
            statement = f"{statement} {filter_clause.strip()}"

        start_position = offset + 1 if offset is not None else None
        result = self._request("query_entities", statement, self._name, start_position, limit)
        return list(result.payload or []) if result.ok else []

    def query_where(
        self,
        where: Mapping[str, Any] | None = None,
        offset: int | None = None,
        limit: int | None = None,
        projection: str | Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        clause = build_where_string(where) if isinstance(where, Mapping) else ""
        return self.query(clause, offset, limit, projection)

    def query_where_in(
        self,
        column: str,
        values: Iterable[Any],
        offset: int | None = None,
        limit: int | None = None,
        projection: str | Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        return self.query(build_where_in_string(column, values), offset, limit, projection)

    def delete(self, id: str | int) -> bool:
        entity = self.find(id)
        if not entity:
            raise ResourceNotFoundError(
                f"The requested {self._name} could not be found for deleting."
            )

        return self._request("delete", self._name, entity).ok

    def has_error(self) -> bool:
        return self.last_error is not None

    def get_error(self) -> str | None:
        if self.last_error is None:
            return None
        return parse_fault_message(self.last_error.response_body)

    def get_error_code(self) -> int | None:
        return self.last_error.http_status_code if self.last_error is not None else None

    def _request(self, method: str, *params: Any) -> QBOResult:
        # Cleared first so an exception other than a fault never leaves a stale error behind.
        self.last_error = None
        self.last_result = None

        client = self._connection.get_client()
        try:
            response = getattr(client, method)(*params)
        except QBOFault as fault:
            logger.warning(
                "QBO %s on %s failed with HTTP %s", method, self._name, fault.http_status_code
            )
            result = QBOResult(ok=False, fault=fault)
        else:
            result = QBOResult(ok=True, payload=response)

        self.last_error = result.fault
        self.last_result = result
        return result


def resource_for(name: str, connection: QBOConnection) -> QuickBooksResource:
    """Build an adapter for a registered resource name without subclassing."""

    return QuickBooksResource(connection, ResourceDefinition(name, get_builder(name)))
