from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time."""
    return datetime.now()


class Clock(Protocol):
    """Wall-clock source injected into services so tests can pin "now"."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()


def age_in_months(birth_date: date, today: date) -> int:
    """Whole calendar months between birth date and today.

    Rule: (years diff * 12) + months diff. The day of month is ignored, so a
    child born on the 20th is one month older from the 1st of the next month.
    """
    return (today.year - birth_date.year) * 12 + (today.month - birth_date.month)


def format_age(months: int) -> str:
    years, rest = divmod(max(int(months), 0), 12)
    if years == 0:
        return f"{rest} month" + ("s" if rest != 1 else "")
    year_s = f"{years} year" + ("s" if years != 1 else "")
    if rest == 0:
        return year_s
    return f"{year_s} {rest} month" + ("s" if rest != 1 else "")


def minutes_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 60
