"""
Pure domain layer.

Data transfer objects and helpers with NO dependencies on:
- Configuration files
- Time/clock (except the Clock abstraction itself)
- I/O

All domain objects are immutable and deterministic.
"""

from payroll_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from payroll_kernel.domain.dtos import (
    CalculationOutcome,
    ValidationError,
    ValidationResult,
)
from payroll_kernel.domain.values import (
    CENTS,
    HUNDRED,
    ZERO,
    non_negative,
    percent_of,
    round_money,
)
