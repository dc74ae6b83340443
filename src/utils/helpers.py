"""Date, rounding and numeric-text helpers shared by the tracker and API."""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterator, Optional


def parse_day(value: str) -> date:
    """Parse a ``yyyy-mm-dd`` calendar day.

    Raises:
        ValueError: if the text is not a valid ISO calendar day.
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"not an ISO calendar day: {value!r}")
    return date.fromisoformat(value)


def format_day(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day is not None else None


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    day = start
    while day <= end:
        yield day
        if day == end:
            break
        day += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def week_bounds(day: date) -> tuple[date, date]:
    """Monday and Sunday of the week containing ``day``; Sunday clamps at ``date.max``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=min(6, (date.max - monday).days))


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero (``round_half_up(12.5) == 13``).

    Returns an ``int`` when ``places`` is 0, else a ``float``.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def parse_number(value: Any) -> Optional[float]:
    """Parse numeric text such as ``"-12.50"``; ``None`` when unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
    return number if math.isfinite(number) else None
