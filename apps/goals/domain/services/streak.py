# apps/goals/domain/services/streak.py
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

import pytz


def to_utc_day(value: datetime) -> date:
    """Sprowadza znacznik czasu do dnia kalendarzowego w UTC (naive = UTC)."""
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC).date()


def compute_streak(completed_timestamps: Iterable[datetime], now: Optional[datetime] = None) -> int:
    """
    Liczba kolejnych dni (kończących się dziś lub wczoraj),
    w których ukończono przynajmniej jeden kamień milowy.
    """
    now = now or datetime.now(pytz.UTC)
    today = to_utc_day(now)

    days = {to_utc_day(ts) for ts in completed_timestamps if ts is not None}
    if not days:
        return 0

    last_day = max(days)
    # Ostatnia aktywność dawniej niż wczoraj -> seria przerwana
    if (today - last_day).days > 1:
        return 0

    streak = 1
    current = last_day - timedelta(days=1)
    while current in days:
        streak += 1
        current -= timedelta(days=1)

    return streak
