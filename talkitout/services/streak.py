"""Consecutive-day journaling streak.

Calendar days are compared in UTC. Naive datetimes are taken to be UTC.
"""

import logging
from datetime import UTC, date, datetime, timedelta

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _utc_day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return _as_utc(value).date()
    return value


def update_streak(
    last_date: datetime | date | None,
    new_date: datetime | date,
    current: int,
) -> int:
    """Return the streak count after saving an entry on ``new_date``.

    - No previous entry: 1.
    - Same calendar day as the previous entry: unchanged.
    - Exactly the next calendar day: ``current + 1``.
    - Anything else (a gap, or a date before the previous entry): 1.
    """
    if last_date is None:
        return 1

    last_day = _utc_day(last_date)
    new_day = _utc_day(new_date)

    if new_day == last_day:
        return current
    if new_day - last_day == timedelta(days=1):
        return current + 1
    return 1


class StreakTracker:
    """Process-lifetime streak state, advanced on every successful save.

    Entries normally arrive in date order. A backdated entry (a pending
    upload saved late) never moves ``last_entry_date`` backwards; it only
    extends the current run when it fills the day just before it.
    """

    def __init__(self, count: int = 0, last_entry_date: datetime | None = None) -> None:
        self.count = count
        self.last_entry_date = last_entry_date
        self._days: set[date] = set()
        if last_entry_date is not None:
            self._days.add(_utc_day(last_entry_date))

    def record(self, entry_date: datetime) -> int:
        """Apply a saved entry's date and return the new streak count."""
        day = _utc_day(entry_date)
        if self.last_entry_date is not None:
            last_day = _utc_day(self.last_entry_date)
            if day < last_day:
                return self._record_backdated(day, last_day)
            if day == last_day and _as_utc(entry_date) < _as_utc(self.last_entry_date):
                self._days.add(day)
                return self.count

        self.count = update_streak(self.last_entry_date, entry_date, self.count)
        self.last_entry_date = entry_date
        self._days.add(day)
        logger.debug("Streak is now %s (last entry %s)", self.count, entry_date.isoformat())
        return self.count

    def _record_backdated(self, day: date, last_day: date) -> int:
        self._days.add(day)
        run_start = last_day - timedelta(days=max(self.count, 1) - 1)
        while run_start - timedelta(days=1) in self._days:
            run_start -= timedelta(days=1)
        self.count = (last_day - run_start).days + 1
        logger.debug("Backdated entry on %s; streak is now %s", day.isoformat(), self.count)
        return self.count
