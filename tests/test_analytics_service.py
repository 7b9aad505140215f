# tests/test_analytics_service.py
"""Unit tests for the analytics aggregator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta

from conftest import make_entry, make_site
from sitesync.services.analytics_service import (
    average_duration_minutes, count_by, last_days_window, summarize,
)
from sitesync.services.records import VisitWindow
from sitesync.utils.time_utils import utcnow

D1 = datetime(2026, 3, 1, 8, 0, 0)
D2 = datetime(2026, 3, 2, 23, 30, 0)


def sample():
    entries = [
        make_entry("e1", site_name="A", visitor_name="John", check_in=D1, check_out=D1 + timedelta(minutes=30)),
        make_entry("e2", site_name="B", visitor_name="Sarah", check_in=D1 + timedelta(hours=2),
                   check_out=D1 + timedelta(hours=3)),
        make_entry("e3", site_name="A", visitor_name="John", check_in=D2, visitor_id="u1"),
        make_entry("e4", site_name="C", visitor_name="David", check_in=D2 + timedelta(minutes=10),
                   visitor_id="u3"),
    ]
    entries[1].visitor_id = "u2"
    sites = [make_site("s1", "A", "q1"), make_site("s2", "B", "q2"), make_site("s3", "C", "q3")]
    return entries, sites


class TestSummarize:
    def test_counts(self):
        entries, sites = sample()
        summary = summarize(entries, sites)
        assert summary.total_visits == 4
        assert summary.active_visits == 2
        assert summary.total_sites == 3

    def test_visits_by_day_uses_iso_date_without_zero_fill(self):
        entries, sites = sample()
        summary = summarize(entries, sites)
        assert summary.visits_by_day == [("2026-03-01", 2), ("2026-03-02", 2)]

    def test_groupings_keep_first_occurrence_order(self):
        entries, sites = sample()
        summary = summarize(entries, sites)
        assert summary.visits_by_site == [("A", 2), ("B", 1), ("C", 1)]
        assert summary.visits_by_user == [("John", 2), ("Sarah", 1), ("David", 1)]

    def test_average_duration_over_completed_only(self):
        entries, sites = sample()
        # 30 min and 60 min
        assert summarize(entries, sites).avg_visit_duration == 45.0

    def test_average_duration_zero_without_completed_entries(self):
        summary = summarize([make_entry("e1"), make_entry("e2")], [])
        assert summary.avg_visit_duration == 0
        assert average_duration_minutes([]) == 0

    def test_empty_logbook(self):
        summary = summarize([], [])
        assert summary.total_visits == 0
        assert summary.active_visits == 0
        assert summary.visits_by_day == []
        assert summary.avg_visit_duration == 0

    def test_idempotent(self):
        entries, sites = sample()
        assert summarize(entries, sites) == summarize(entries, sites)

    def test_window_restricts_totals_but_not_active(self):
        entries, sites = sample()
        window = VisitWindow(start=datetime(2026, 3, 2), end=datetime(2026, 3, 3))
        summary = summarize(entries, sites, window=window)
        assert summary.total_visits == 2
        assert summary.active_visits == 2
        assert summary.visits_by_day == [("2026-03-02", 2)]
        assert summary.visits_by_site == [("A", 1), ("C", 1)]
        assert summary.avg_visit_duration == 0

    def test_window_excludes_active_entries_from_totals_yet_counts_them_active(self):
        entries, sites = sample()
        window = VisitWindow(end=datetime(2026, 3, 2))
        summary = summarize(entries, sites, window=window)
        assert summary.total_visits == 2
        assert summary.active_visits == 2

    def test_day_window_only_narrows_visits_by_day(self):
        entries, sites = sample()
        summary = summarize(entries, sites, day_window=VisitWindow(start=datetime(2026, 3, 2)))
        assert summary.visits_by_day == [("2026-03-02", 2)]
        assert summary.total_visits == 4
        assert summary.visits_by_site == [("A", 2), ("B", 1), ("C", 1)]
        assert summary.avg_visit_duration == 45.0

    def test_total_users_from_member_count(self):
        entries, sites = sample()
        assert summarize(entries, sites, total_users=12).total_users == 12

    def test_total_users_falls_back_to_distinct_visitors(self):
        entries, sites = sample()
        assert summarize(entries, sites).total_users == 3


class TestHelpers:
    def test_count_by(self):
        assert count_by(["b", "a", "b", "c", "a", "b"]) == [("b", 3), ("a", 2), ("c", 1)]

    def test_window_bounds_are_half_open(self):
        window = VisitWindow(start=D1, end=D2)
        assert window.contains(D1)
        assert not window.contains(D2)
        assert VisitWindow().contains(D1)

    def test_last_days_window(self):
        window = last_days_window(30)
        assert window.end is None
        assert utcnow() - window.start >= timedelta(days=30)
        assert utcnow() - window.start < timedelta(days=30, minutes=1)
