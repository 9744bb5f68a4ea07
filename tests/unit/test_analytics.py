"""
Unit tests for dashboard analytics helpers.
"""

from datetime import date

import pytest

from superadmin.services.analytics import growth_rate, month_label, monthly_registrations, plan_distribution

pytestmark = pytest.mark.unit


class TestMonthlyRegistrations:
    """Test calendar month bucketing."""

    def test_six_buckets_oldest_first(self):
        buckets = monthly_registrations([], date(2026, 10, 18))

        assert [bucket["month"] for bucket in buckets] == [
            "May 2026", "Jun 2026", "Jul 2026", "Aug 2026", "Sep 2026", "Oct 2026",
        ]
        assert all(bucket["count"] == 0 for bucket in buckets)

    def test_counts_cross_year_boundary(self):
        created = [date(2025, 11, 3), date(2025, 12, 31), date(2026, 1, 1), date(2026, 1, 20)]

        buckets = monthly_registrations(created, date(2026, 2, 10))

        assert buckets[0]["month"] == "Sep 2025"
        counts = {bucket["month"]: bucket["count"] for bucket in buckets}
        assert counts["Nov 2025"] == 1
        assert counts["Dec 2025"] == 1
        assert counts["Jan 2026"] == 2
        assert counts["Feb 2026"] == 0

    def test_registrations_outside_window_ignored(self):
        buckets = monthly_registrations([date(2020, 1, 1)], date(2026, 10, 18))

        assert sum(bucket["count"] for bucket in buckets) == 0

    def test_month_label(self):
        assert month_label(2026, 1) == "Jan 2026"


class TestGrowthRate:
    """Test month over month growth."""

    def test_growth_against_previous_month(self):
        assert growth_rate([{"count": 4}, {"count": 6}]) == 50

    def test_decline(self):
        assert growth_rate([{"count": 4}, {"count": 1}]) == -75

    def test_previous_month_zero_counts_as_one(self):
        assert growth_rate([{"count": 0}, {"count": 3}]) == 200


class TestPlanDistribution:
    """Test subscriptions per plan."""

    def test_counts_by_plan_most_common_first(self):
        result = plan_distribution(["Starter", "Professional", "Starter", None])

        assert result[0] == {"plan": "Starter", "count": 2}
        assert {"plan": "Unknown", "count": 1} in result
        assert {"plan": "Professional", "count": 1} in result
