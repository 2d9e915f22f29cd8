from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Iterator, Tuple, Union

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

YearMonth = Tuple[int, int]


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def days_in_month(year: int, month: int) -> int:
    """Last valid day (28-31) of a 1-based month."""
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of the 1st, 0 = Sunday .. 6 = Saturday."""
    return (date(year, month, 1).weekday() + 1) % 7


def parse_naive_date(value: Union[str, date]) -> date:
    """
    Parse "YYYY-MM-DD" into a plain calendar date.

    No time component is attached, so the value can never drift to the
    previous day under a negative UTC offset. Components need not be
    zero-padded. Malformed input raises ValueError from the date constructor.
    """
    if isinstance(value, date):
        return value
    year, month, day = (int(part) for part in value.strip().split("-")[:3])
    return date(year, month, day)


def format_naive_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def clamp_day(year: int, month: int, day: int) -> date:
    """Date for `day` in the month, pulled back to the last valid day."""
    return date(year, month, min(day, days_in_month(year, month)))


def in_month(d: date, year: int, month: int) -> bool:
    return d.year == year and d.month == month


def months_between(start: date, year: int, month: int) -> int:
    """Whole calendar months from start's month to (year, month); negative before start."""
    return (year - start.year) * 12 + (month - start.month)


def add_months(year: int, month: int, n: int) -> YearMonth:
    shifted = date(year, month, 1) + relativedelta(months=n)
    return shifted.year, shifted.month


def iter_months(start: YearMonth, stop: YearMonth) -> Iterator[YearMonth]:
    """Yield (year, month) from start up to but not including stop."""
    year, month = start
    while (year, month) < stop:
        yield year, month
        year, month = add_months(year, month, 1)


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def round_currency(x, decimals: int = 2):
    """Round half away from zero (vectorized), like a spreadsheet ROUND."""
    m = 10 ** decimals
    arr = np.asarray(x, dtype=float)
    out = np.sign(arr) * (np.floor(np.abs(arr) * m + 0.5) / m)
    if out.ndim == 0:
        return float(out)
    return out


def format_currency(amount: float) -> str:
    """USD display string, e.g. -$1,234.50."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
