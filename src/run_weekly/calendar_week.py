from __future__ import annotations
import datetime as dt


def week_start(d: dt.date) -> dt.date:
    """Monday on or before d."""
    return d - dt.timedelta(days=d.weekday())


def week_end(d: dt.date) -> dt.date:
    """Sunday closing the week of d."""
    return week_start(d) + dt.timedelta(days=6)


def first_week_end(year: int) -> dt.date:
    """
    Last day of week 1: the first Sunday on or after Jan 1.
    If Jan 1 is itself a Sunday, week 1 is that single day.
    """
    jan1 = dt.date(year, 1, 1)
    offset = (6 - jan1.weekday()) % 7
    return jan1 + dt.timedelta(days=offset)


def calendar_week_index(d: dt.date) -> int:
    """
    Per-year week ordinal. Week 1 runs from Jan 1 through first_week_end(year)
    (inclusive), every following week is a full Monday..Sunday block.
    This is not the ISO-8601 week number.
    """
    f_end = first_week_end(d.year)
    if d <= f_end:
        return 1
    return 2 + (d - (f_end + dt.timedelta(days=1))).days // 7


def year_week_key(d: dt.date) -> str:
    return f"{d.year}-{calendar_week_index(d):02d}"
