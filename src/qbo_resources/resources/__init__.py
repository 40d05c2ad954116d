"""Typed adapters, one per QBO entity type."""

from .lists import (
    QuickBooksAccount,
    QuickBooksClass,
    QuickBooksCustomer,
    QuickBooksDepartment,
    QuickBooksItem,
    QuickBooksTerm,
    QuickBooksVendor,
)

__all__ = [
    "QuickBooksAccount",
    "QuickBooksClass",
    "QuickBooksCustomer",
    "QuickBooksDepartment",
    "QuickBooksItem",
    "QuickBooksTerm",
    "QuickBooksVendor",
]
