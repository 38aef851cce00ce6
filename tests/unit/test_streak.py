"""Unit tests for the consecutive-day streak rules."""

from datetime import UTC, date, datetime, timedelta, timezone

from talkitout.services.streak import StreakTracker, update_streak

DAY1 = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


class TestUpdateStreak:
    def test_first_entry_starts_at_one(self):
        assert update_streak(None, DAY1, 0) == 1

    def test_same_day_keeps_count(self):
        later = DAY1.replace(hour=23, minute=59)
        assert update_streak(DAY1, later, 4) == 4

    def test_next_day_increments(self):
        assert update_streak(DAY1, DAY1 + timedelta(days=1), 4) == 5

    def test_next_day_across_month_boundary(self):
        last = datetime(2026, 2, 28, 22, 0, tzinfo=UTC)
        assert update_streak(last, datetime(2026, 3, 1, 1, 0, tzinfo=UTC), 2) == 3

    def test_gap_resets(self):
        assert update_streak(DAY1, DAY1 + timedelta(days=2), 7) == 1

    def test_earlier_date_resets(self):
        assert update_streak(DAY1, DAY1 - timedelta(days=1), 3) == 1

    def test_less_than_24h_but_next_calendar_day_increments(self):
        last = datetime(2026, 3, 1, 23, 30, tzinfo=UTC)
        assert update_streak(last, datetime(2026, 3, 2, 0, 15, tzinfo=UTC), 1) == 2

    def test_days_compared_in_utc(self):
        # 20:00 at UTC-5 on Mar 1 is 01:00 UTC on Mar 2
        eastern = timezone(timedelta(hours=-5))
        last = datetime(2026, 3, 1, 20, 0, tzinfo=eastern)
        assert update_streak(last, datetime(2026, 3, 2, 10, 0, tzinfo=UTC), 3) == 3

    def test_naive_datetimes_are_utc(self):
        assert update_streak(datetime(2026, 3, 1, 12), DAY1 + timedelta(days=1), 1) == 2

    def test_accepts_plain_dates(self):
        assert update_streak(date(2026, 3, 1), date(2026, 3, 2), 1) == 2


class TestStreakTracker:
    def test_initial_state(self):
        tracker = StreakTracker()
        assert tracker.count == 0
        assert tracker.last_entry_date is None

    def test_record_sequence(self):
        tracker = StreakTracker()
        assert tracker.record(DAY1) == 1
        assert tracker.record(DAY1 + timedelta(hours=3)) == 1
        assert tracker.record(DAY1 + timedelta(days=1)) == 2
        assert tracker.record(DAY1 + timedelta(days=2)) == 3
        assert tracker.record(DAY1 + timedelta(days=5)) == 1
        assert tracker.last_entry_date == DAY1 + timedelta(days=5)

    def test_count_is_at_least_one_after_any_entry(self):
        tracker = StreakTracker(count=0, last_entry_date=DAY1)
        tracker.record(DAY1 + timedelta(days=10))
        assert tracker.count >= 1

    def test_backdated_entry_keeps_last_date(self):
        tracker = StreakTracker()
        tracker.record(DAY1 + timedelta(days=1))
        tracker.record(DAY1 + timedelta(days=2))

        assert tracker.record(DAY1 - timedelta(days=3)) == 2
        assert tracker.last_entry_date == DAY1 + timedelta(days=2)

    def test_backdated_entry_extends_run(self):
        tracker = StreakTracker()
        tracker.record(DAY1 + timedelta(days=1))
        tracker.record(DAY1 + timedelta(days=2))

        assert tracker.record(DAY1) == 3
        assert tracker.last_entry_date == DAY1 + timedelta(days=2)

    def test_backdated_entry_bridges_to_earlier_days(self):
        tracker = StreakTracker()
        tracker.record(DAY1)
        tracker.record(DAY1 + timedelta(days=2))
        assert tracker.count == 1

        assert tracker.record(DAY1 + timedelta(days=1)) == 3

    def test_earlier_entry_on_same_day_keeps_latest_time(self):
        tracker = StreakTracker()
        late = DAY1.replace(hour=20)
        tracker.record(late)
        tracker.record(DAY1)
        assert tracker.count == 1
        assert tracker.last_entry_date == late
