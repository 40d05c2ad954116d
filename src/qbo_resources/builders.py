"""Per-entity request-body builders and the registry keyed by resource name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol


class InvalidResourceError(ValueError):
    pass


class EntityBuilder(Protocol):
    def build_create(self, attributes: Mapping[str, Any]) -> dict[str, Any]: ...

    def build_update(
        self, existing: Mapping[str, Any], attributes: Mapping[str, Any]
    ) -> dict[str, Any]: ...


_SERVER_FIELDS = ("Id", "SyncToken", "MetaData", "domain", "sparse")


@dataclass(frozen=True, slots=True)
class SparseEntityBuilder:
    """Builds create bodies from attributes and sparse update bodies.

    A sparse update sends only `Id`, `SyncToken` and the changed fields; QBO
    leaves every other field of the stored entity untouched.
    """

    required_fields: tuple[str, ...] = ()

    def build_create(self, attributes: Mapping[str, Any]) -> dict[str, Any]:
        missing = [f for f in self.required_fields if attributes.get(f) in (None, "")]
        if missing:
            raise ValueError(f"Missing required field(s): {', '.join(missing)}")
        return {k: v for k, v in attributes.items() if k not in _SERVER_FIELDS}

    def build_update(
        self, existing: Mapping[str, Any], attributes: Mapping[str, Any]
    ) -> dict[str, Any]:
        if not existing.get("Id") or existing.get("SyncToken") is None:
            raise ValueError("Existing entity must carry Id and SyncToken to be updated")
        body: dict[str, Any] = {
            "Id": existing["Id"],
            "SyncToken": existing["SyncToken"],
            "sparse": True,
        }
        body.update({k: v for k, v in attributes.items() if k not in _SERVER_FIELDS})
        return body


_REGISTRY: dict[str, EntityBuilder] = {
    "Class": SparseEntityBuilder(required_fields=("Name",)),
    "Department": SparseEntityBuilder(required_fields=("Name",)),
    "Account": SparseEntityBuilder(required_fields=("Name",)),
    "Customer": SparseEntityBuilder(),
    "Vendor": SparseEntityBuilder(),
    "Item": SparseEntityBuilder(required_fields=("Name",)),
    "Term": SparseEntityBuilder(required_fields=("Name",)),
}


def register_builder(name: str, builder: EntityBuilder) -> None:
    _REGISTRY[name] = builder


def get_builder(name: str) -> EntityBuilder:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise InvalidResourceError(f"No QuickBooks resource registered as {name!r}") from None


def registered_resources() -> list[str]:
    return sorted(_REGISTRY)
