"""
Typed exception hierarchy for the payroll kernel.

Business input problems (a negative salary, an impossible day count) are
NOT exceptions: calculations report them as ``ValidationError`` values inside
a ``CalculationOutcome``.  The classes below cover what a caller cannot fix
by correcting one field: missing or malformed statutory configuration and
broken pay-item catalogs.

Every exception carries a ``code`` class attribute (machine-readable,
API-safe) and stores its context as attributes rather than only inside the
message.

    PayrollKernelError (base)
    |
    +-- ConfigurationError
    |   +-- StatutoryTablesNotFoundError
    |   +-- InvalidStatutoryTablesError
    |
    +-- CatalogError
        +-- PayItemCatalogError
        +-- DuplicatePayItemError

Handling pattern::

    try:
        tables = get_statutory_tables(reference_date)
    except StatutoryTablesNotFoundError as e:
        return api_error(code=e.code, as_of=e.as_of_date)
"""

from __future__ import annotations

from datetime import date


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(PayrollKernelError):
    """Base exception for statutory configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class StatutoryTablesNotFoundError(ConfigurationError):
    """No statutory table set is effective on the requested date."""

    code: str = "STATUTORY_TABLES_NOT_FOUND"

    def __init__(self, as_of_date: date, searched: str):
        self.as_of_date = as_of_date
        self.searched = searched
        super().__init__(
            f"No statutory tables effective on {as_of_date.isoformat()} in {searched}"
        )


class InvalidStatutoryTablesError(ConfigurationError):
    """A statutory table set failed structural validation."""

    code: str = "INVALID_STATUTORY_TABLES"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(
            f"Statutory tables from {source} are invalid: {'; '.join(errors)}"
        )


# Catalog exceptions


class CatalogError(PayrollKernelError):
    """Base exception for pay-item catalog errors."""

    code: str = "CATALOG_ERROR"


class PayItemCatalogError(CatalogError):
    """A pay-item definition in a catalog could not be parsed."""

    code: str = "PAY_ITEM_CATALOG_ERROR"

    def __init__(self, source: str, item: str, reason: str):
        self.source = source
        self.item = item
        self.reason = reason
        super().__init__(f"Invalid pay item {item!r} in {source}: {reason}")


class DuplicatePayItemError(CatalogError):
    """Two catalog entries share the same item id."""

    code: str = "DUPLICATE_PAY_ITEM"

    def __init__(self, source: str, item_id: str):
        self.source = source
        self.item_id = item_id
        super().__init__(f"Duplicate pay item id {item_id!r} in {source}")
