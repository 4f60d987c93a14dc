"""
payroll_config -- single public entrypoint for statutory configuration.

Responsibility:
    Provides the runtime way to obtain the statutory tables through
    ``get_statutory_tables()`` and the pay-item catalog through
    ``get_pay_item_catalog()``.  Engines never read configuration files;
    they receive the parsed tables as parameters.

Architecture position:
    Configuration -- YAML-driven tax-year sets, validated at load time.
    Sits above ``payroll_engines`` and below ``payroll_services``.

Invariants enforced:
    - Date resolution: exactly the set whose effective range covers the
      requested date is returned; when ranges overlap the most recent
      ``effective_from`` wins.
    - Validation: every set passes ``validate_statutory_tables`` before
      it is returned.

Failure modes:
    - ``StatutoryTablesNotFoundError`` -- no set is effective on the date.
    - ``InvalidStatutoryTablesError`` -- a set failed parsing or validation.
    - ``FileNotFoundError`` -- the configuration directory is missing.

Audit relevance:
    Every successful ``get_statutory_tables()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with the version, effective range
    and checksum of the tables that governed the calculation.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from payroll_config.loader import (
    compute_checksum,
    load_pay_item_catalog,
    load_statutory_sets,
    parse_statutory_tables,
)
from payroll_config.validator import ConfigValidationResult, validate_statutory_tables
from payroll_engines.tables import StatutoryTables
from payroll_engines.types import PayItemDefinition
from payroll_kernel.exceptions import StatutoryTablesNotFoundError
from payroll_kernel.logging_config import get_logger

logger = get_logger("config")

_PACKAGE_DIR = Path(__file__).parent
_DEFAULT_SETS_DIR = _PACKAGE_DIR / "sets"
_DEFAULT_CATALOG = _PACKAGE_DIR / "catalogs" / "default_pay_items.yaml"


def get_statutory_tables(
    as_of_date: date,
    config_dir: Path | None = None,
) -> StatutoryTables:
    """Return the statutory tables effective on ``as_of_date``.

    Args:
        as_of_date: Reference date of the calculation.
        config_dir: Override path to the table sets directory.
            Defaults to payroll_config/sets/.

    Raises:
        StatutoryTablesNotFoundError: If no set covers ``as_of_date``.
        InvalidStatutoryTablesError: If a set fails validation.
    """
    sets_dir = config_dir or _DEFAULT_SETS_DIR
    candidates = [t for t in load_statutory_sets(sets_dir) if t.is_effective(as_of_date)]
    if not candidates:
        raise StatutoryTablesNotFoundError(as_of_date, str(sets_dir))

    tables = max(candidates, key=lambda t: t.effective_from)

    logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "as_of_date": as_of_date.isoformat(),
            "tables_version": tables.version,
            "effective_from": tables.effective_from.isoformat(),
            "effective_to": tables.effective_to.isoformat() if tables.effective_to else None,
            "checksum": tables.checksum,
        },
    )
    return tables


def get_pay_item_catalog(path: Path | None = None) -> tuple[PayItemDefinition, ...]:
    """Load a pay-item catalog (the shipped default when ``path`` is None)."""
    return load_pay_item_catalog(path or _DEFAULT_CATALOG)


__all__ = [
    "ConfigValidationResult",
    "compute_checksum",
    "get_pay_item_catalog",
    "get_statutory_tables",
    "load_pay_item_catalog",
    "load_statutory_sets",
    "parse_statutory_tables",
    "validate_statutory_tables",
]
