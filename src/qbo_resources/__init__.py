"""Adapters for QuickBooks Online accounting resources.

Keep these modules small and testable:
- Network + auth lives in `client`
- Adapters only translate verbs into one client call each
"""

from .builders import (
    EntityBuilder,
    InvalidResourceError,
    SparseEntityBuilder,
    get_builder,
    register_builder,
    registered_resources,
)
from .client import QBOAuthTokens, QBOClient
from .connection import QBOConnection
from .faults import QBOFault, parse_fault_message
from .query_builder import InvalidQueryError, QueryBuilder, build_where_in_string, build_where_string
from .resource import (
    QBOResult,
    QuickBooksResource,
    ResourceDefinition,
    ResourceNotFoundError,
    resource_for,
)
from .resources import (
    QuickBooksAccount,
    QuickBooksClass,
    QuickBooksCustomer,
    QuickBooksDepartment,
    QuickBooksItem,
    QuickBooksTerm,
    QuickBooksVendor,
)

__all__ = [
    "EntityBuilder",
    "InvalidQueryError",
    "InvalidResourceError",
    "QBOAuthTokens",
    "QBOClient",
    "QBOConnection",
    "QBOFault",
    "QBOResult",
    "QueryBuilder",
    "QuickBooksAccount",
    "QuickBooksClass",
    "QuickBooksCustomer",
    "QuickBooksDepartment",
    "QuickBooksItem",
    "QuickBooksResource",
    "QuickBooksTerm",
    "QuickBooksVendor",
    "ResourceDefinition",
    "ResourceNotFoundError",
    "SparseEntityBuilder",
    "build_where_in_string",
    "build_where_string",
    "get_builder",
    "parse_fault_message",
    "register_builder",
    "registered_resources",
    "resource_for",
]
