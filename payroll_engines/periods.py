"""
Calendar arithmetic for proportional entitlements.

Tenure, notice projection and the month counts behind "x/12" entitlements
(proportional vacation and 13th salary).  All functions are pure and take
every date they need as an argument.
"""

from __future__ import annotations

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta

BASE_NOTICE_DAYS = 30
NOTICE_DAYS_PER_YEAR = 3
MAX_NOTICE_DAYS = 90
FRACTION_DAY = 15  # a month counts from its 15th day worked


def days_in_month(on_date: date) -> int:
    return calendar.monthrange(on_date.year, on_date.month)[1]


def tenure_years(admission: date, on_date: date) -> int:
    """Full years between admission and ``on_date``."""
    return relativedelta(on_date, admission).years


def notice_days(admission: date, termination: date) -> int:
    """30 days plus 3 per full year of tenure, capped at 90."""
    days = BASE_NOTICE_DAYS + NOTICE_DAYS_PER_YEAR * tenure_years(admission, termination)
    return min(days, MAX_NOTICE_DAYS)


def project_date(termination: date, notice: int) -> date:
    """Advance the termination date by the notice period's whole months."""
    return termination + relativedelta(months=notice // BASE_NOTICE_DAYS)


def accrual_start(admission: date, projected: date) -> date:
    """1 January of the projected year, or the admission date if later."""
    return max(date(projected.year, 1, 1), admission)


def calendar_months_between(start: date, end: date) -> int:
    """Calendar months from ``start``'s month to ``end``'s month, inclusive."""
    if end < start:
        return 0
    return (end.year - start.year) * 12 + end.month - start.month + 1


def proportional_vacation_months(admission: date, projected: date) -> int:
    """
    Twelfths of proportional vacation due at ``projected``.

    Counts calendar months from the start of the accrual year through the
    projected month, dropping the projected month when fewer than 15 of
    its days elapsed.
    """
    months = calendar_months_between(accrual_start(admission, projected), projected)
    if months and projected.day < FRACTION_DAY:
        months -= 1
    return months


def proportional_thirteenth_months(admission: date, projected: date) -> int:
    """Twelfths of 13th salary due on termination (projected month included)."""
    return calendar_months_between(accrual_start(admission, projected), projected)


def months_worked_in_year(admission: date, year: int, through: date) -> int:
    """
    Months of ``year`` with at least 15 days worked up to ``through``.

    Used for the 13th salary of an employee still on the payroll.
    """
    first = max(date(year, 1, 1), admission)
    last = min(date(year, 12, 31), through)
    if last < first:
        return 0

    months = 0
    for month in range(first.month, last.month + 1):
        month_start = max(date(year, month, 1), first)
        month_end = min(date(year, month, calendar.monthrange(year, month)[1]), last)
        if (month_end - month_start).days + 1 >= FRACTION_DAY:
            months += 1
    return months
