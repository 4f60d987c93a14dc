"""
payroll_services -- Package init and public API.

Responsibility:
    Orchestration over the pure payroll engines: resolves the statutory
    tables effective on each event's reference date and owns the clock.

Architecture position:
    Services -- imperative shell over engines + config + kernel.

    Dependency direction:
        payroll_services/ -> payroll_config/, payroll_engines/, payroll_kernel/
        payroll_engines/  -> payroll_services/ (FORBIDDEN)
        payroll_kernel/   -> payroll_services/ (FORBIDDEN)
"""

from payroll_services.statutory_payroll_service import StatutoryPayrollService

__all__ = [
    "StatutoryPayrollService",
]
