"""Date manipulation utilities for credit card statement cycles"""

import calendar
from datetime import date, datetime
from zoneinfo import ZoneInfo


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in the given month (1-12), leap years included"""
    return calendar.monthrange(year, month)[1]


def statement_date(year: int, month: int, statement_day: int) -> date:
    """Statement date for a month, clamped so it never spills into the next month"""
    return date(year, month, min(statement_day, last_day_of_month(year, month)))


def first_statement_on_or_after(start_date: date, statement_day: int) -> date:
    """
    Earliest statement date that is not before start_date.

    Either the statement date in start_date's own month, or the one in the
    following month (December wraps to January of the next year).
    """
    same_month = statement_date(start_date.year, start_date.month, statement_day)
    if same_month >= start_date:
        return same_month

    if start_date.month == 12:
        return statement_date(start_date.year + 1, 1, statement_day)
    return statement_date(start_date.year, start_date.month + 1, statement_day)


def add_cycles(base_date: date, statement_day: int, cycles: int) -> date:
    """
    Advance base_date's month by whole statement cycles.

    The day of month is always the (re-clamped) statement day of the target
    month, not base_date's day.

    Example:
        add_cycles(date(2024, 11, 15), 31, 2) -> date(2025, 1, 31)
    """
    month_index = (base_date.month - 1) + cycles
    target_year = base_date.year + month_index // 12
    target_month = month_index % 12 + 1
    return statement_date(target_year, target_month, statement_day)


def current_date(timezone_name: str) -> date:
    """Today's date in a fixed reference timezone"""
    return datetime.now(ZoneInfo(timezone_name)).date()
