"""
Pytest fixtures for the statutory payroll test suite.

Provides:
- The shipped 2024 and 2025 statutory tables
- A standard employee and pay-item catalog
- Structured-logging setup and log capture
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from payroll_config import get_pay_item_catalog, get_statutory_tables
from payroll_engines.types import Employee, PayrollLineEntry
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_payroll(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_calculation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Statutory tables and catalog
# =============================================================================


@pytest.fixture(scope="session")
def tables_2024():
    return get_statutory_tables(date(2024, 6, 1))


@pytest.fixture(scope="session")
def tables_2025():
    return get_statutory_tables(date(2025, 6, 1))


@pytest.fixture(scope="session")
def catalog():
    """Default pay-item catalog keyed by item id."""
    return {item.item_id: item for item in get_pay_item_catalog()}


@pytest.fixture
def employee():
    """CLT employee on R$ 3.000,00, no dependents, admitted March 2022."""
    return Employee(
        base_salary=Decimal("3000.00"),
        dependents=0,
        admission_date=date(2022, 3, 1),
        employee_id="EMP-001",
    )


@pytest.fixture
def salary_entry(catalog):
    """Factory for a base-salary payroll line."""

    def _make(amount: str = "3000.00") -> PayrollLineEntry:
        return PayrollLineEntry(
            item=catalog["salary"],
            reference=Decimal("30"),
            earning=Decimal(amount),
        )

    return _make
