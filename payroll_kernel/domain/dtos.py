"""
Validation DTOs and the calculation result envelope.

Calculations never raise for bad business input.  They return a
``CalculationOutcome`` that holds either a result or the validation errors
that prevented one, so every call site handles "no result" as an ordinary
branch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ValidationCode:
    """Machine-readable validation error codes."""

    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    NEGATIVE_COUNT = "NEGATIVE_COUNT"
    INVALID_DAY_COUNT = "INVALID_DAY_COUNT"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    NOT_DECIMAL = "NOT_DECIMAL"


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation error.

    Contract:
        Carries a machine-readable code, human-readable message, optional field
        name, and optional details dict.

    Non-goals:
        - Does NOT raise exceptions -- it IS the error representation.
    """

    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Aggregate of zero or more ValidationErrors.

    ``bool(result) == result.is_valid`` for convenience.
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        """Create a successful validation result."""
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        """Create a failed validation result."""
        return cls(is_valid=False, errors=tuple(errors))

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass(frozen=True)
class CalculationOutcome(Generic[T]):
    """
    Result of a top-level payroll calculation.

    Contract:
        Either contains a result OR validation errors, never both.
        When ``is_valid`` is True, ``result`` is guaranteed non-None.

    Non-goals:
        - Does NOT persist anything -- purely a return value.
    """

    result: T | None
    validation: ValidationResult

    @classmethod
    def success(cls, result: T) -> CalculationOutcome[T]:
        return cls(result=result, validation=ValidationResult.success())

    @classmethod
    def failure(cls, *errors: ValidationError) -> CalculationOutcome[T]:
        """
        Create a failed outcome.

        Preconditions:
            - At least one ValidationError is provided.
        """
        assert errors, "A failed outcome needs at least one ValidationError"
        return cls(result=None, validation=ValidationResult.failure(*errors))

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid and self.result is not None

    @property
    def errors(self) -> tuple[ValidationError, ...]:
        return self.validation.errors

    def unwrap(self) -> T:
        """Return the result; raise ValueError if the outcome failed."""
        if self.result is None:
            codes = ", ".join(e.code for e in self.validation.errors)
            raise ValueError(f"Calculation failed validation: {codes}")
        return self.result
