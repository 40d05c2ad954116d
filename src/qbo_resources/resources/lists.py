"""QBO list entities (Class, Department, Account, ...)."""

from __future__ import annotations

from ..builders import get_builder
from ..resource import QuickBooksResource


class QuickBooksClass(QuickBooksResource):
    name = "Class"
    builder = get_builder("Class")


class QuickBooksDepartment(QuickBooksResource):
    name = "Department"
    builder = get_builder("Department")


class QuickBooksAccount(QuickBooksResource):
    name = "Account"
    builder = get_builder("Account")


class QuickBooksCustomer(QuickBooksResource):
    name = "Customer"
    builder = get_builder("Customer")


class QuickBooksVendor(QuickBooksResource):
    name = "Vendor"
    builder = get_builder("Vendor")


class QuickBooksItem(QuickBooksResource):
    name = "Item"
    builder = get_builder("Item")


class QuickBooksTerm(QuickBooksResource):
    name = "Term"
    builder = get_builder("Term")
