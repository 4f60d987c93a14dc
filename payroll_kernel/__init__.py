"""
Payroll Kernel

Shared primitives for the statutory payroll engine:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- Decimal money rounding helpers
- Validation DTOs and the CalculationOutcome result type
- Injectable clock
"""

__version__ = "0.1.0"
