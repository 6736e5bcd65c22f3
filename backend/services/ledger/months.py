"""
Календарные месяцы для складского учёта.

Месяц: кортеж (год, месяц). Сравнение кортежей лексикографическое,
день даты в сравнении не участвует.
"""
from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, datetime
from typing import Optional, Tuple, Union

from .errors import InvalidMonthFormat

Month = Tuple[int, int]
MonthInput = Union[str, Month]

MONTH_RE = re.compile(r"\d{4}-\d{2}", re.ASCII)


def parse_month(value: str) -> Month:
    """'2026-01' → (2026, 1). Всё остальное: InvalidMonthFormat."""
    if not isinstance(value, str) or not MONTH_RE.fullmatch(value):
        raise InvalidMonthFormat(value)
    year, month = int(value[:4]), int(value[5:])
    if not 1 <= month <= 12:
        raise InvalidMonthFormat(value)
    return year, month


def to_month(value: MonthInput) -> Month:
    """Принимает строку YYYY-MM или готовый кортеж (год, месяц)."""
    if isinstance(value, tuple):
        if len(value) != 2 or not all(isinstance(x, int) and not isinstance(x, bool) for x in value):
            raise InvalidMonthFormat(value)
        if not 1 <= value[1] <= 12:
            raise InvalidMonthFormat(value)
        return value[0], value[1]
    return parse_month(value)


def format_month(month: Month) -> str:
    return f"{month[0]:04d}-{month[1]:02d}"


def month_of(day: date) -> Month:
    return day.year, day.month


def next_month(month: MonthInput) -> Month:
    year, m = to_month(month)
    return (year + 1, 1) if m == 12 else (year, m + 1)


def previous_month(month: MonthInput) -> Month:
    year, m = to_month(month)
    return (year - 1, 12) if m == 1 else (year, m - 1)


def first_day(month: MonthInput) -> date:
    year, m = to_month(month)
    return date(year, m, 1)


def last_day(month: MonthInput) -> date:
    year, m = to_month(month)
    return date(year, m, monthrange(year, m)[1])


def current_month(today: Optional[date] = None) -> Month:
    today = today or date.today()
    return month_of(today)


def parse_day(value: Union[str, date]) -> date:
    """
    Дата движения: 'ДД.ММ.ГГГГ' (как в старых данных) или 'ГГГГ-ММ-ДД'.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in ("%d.%m.%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Неверный формат даты: {value!r}. Используйте ДД.ММ.ГГГГ")


def format_day(day: date) -> str:
    return day.strftime("%d.%m.%Y")
