"""
Lightweight precondition checks for calculation inputs.

Each check returns a ``ValidationError`` (or None) instead of raising, so the
engines can collect every problem with an input before reporting.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from payroll_kernel.domain.dtos import ValidationCode, ValidationError


def check_non_negative_amount(value: Decimal, name: str) -> ValidationError | None:
    if not isinstance(value, Decimal):
        return ValidationError(
            code=ValidationCode.NOT_DECIMAL,
            message=f"{name} must be Decimal, not {type(value).__name__}",
            field=name,
        )
    if value < 0:
        return ValidationError(
            code=ValidationCode.NEGATIVE_AMOUNT,
            message=f"{name} cannot be negative",
            field=name,
            details={"value": str(value)},
        )
    return None


def check_non_negative_count(value: int | Decimal, name: str) -> ValidationError | None:
    if value < 0:
        return ValidationError(
            code=ValidationCode.NEGATIVE_COUNT,
            message=f"{name} cannot be negative",
            field=name,
            details={"value": str(value)},
        )
    return None


def check_day_count(
    value: int,
    name: str,
    minimum: int,
    maximum: int,
) -> ValidationError | None:
    if value < minimum or value > maximum:
        return ValidationError(
            code=ValidationCode.INVALID_DAY_COUNT,
            message=f"{name} must be between {minimum} and {maximum}",
            field=name,
            details={"value": value, "minimum": minimum, "maximum": maximum},
        )
    return None


def check_not_before(
    later: date,
    earlier: date,
    name: str,
    earlier_name: str,
) -> ValidationError | None:
    if later < earlier:
        return ValidationError(
            code=ValidationCode.INVALID_DATE_RANGE,
            message=f"{name} cannot precede {earlier_name}",
            field=name,
            details={name: later.isoformat(), earlier_name: earlier.isoformat()},
        )
    return None


def collect(*checks: ValidationError | None) -> list[ValidationError]:
    """Drop the passing checks, keep the errors in order."""
    return [c for c in checks if c is not None]
