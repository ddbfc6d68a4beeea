"""Purchase-date schedule for each cadence, anchored on the tracking start date."""

from __future__ import annotations

from datetime import date

from models import Cadence


def is_scheduled_date(day: date, cadence: Cadence, start_date: date) -> bool:
    """Return True if ``day`` is a purchase date for ``cadence`` anchored at ``start_date``.

    Works on plain dates only so results never depend on timezone or DST.

    Monthly schedules match the anchor's day-of-month exactly. An anchor on
    the 29th-31st therefore skips months that lack that day; there is no
    roll-over to month end.
    """
    if day < start_date:
        return False

    cadence = Cadence(cadence)
    if cadence is Cadence.DAILY:
        return True
    if cadence is Cadence.WEEKLY:
        return day.weekday() == start_date.weekday()
    if cadence is Cadence.BIWEEKLY:
        weeks = (day - start_date).days // 7
        return day.weekday() == start_date.weekday() and weeks % 2 == 0
    if cadence is Cadence.MONTHLY:
        return day.day == start_date.day
    return False


def scheduled_dates(days, cadence: Cadence, start_date: date) -> list[date]:
    """Filter ``days`` down to the scheduled ones, preserving order."""
    return [d for d in days if is_scheduled_date(d, cadence, start_date)]


def years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier; Feb 29 maps to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)
