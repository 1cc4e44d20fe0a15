"""
Tests for the Timeline Extractor.

Covers:
- Original, current and actual durations
- Days overdue (open vs complete projects)
- Completion clamping and forecast confidence
- Missing dates
"""

from datetime import datetime, timedelta, timezone

import pytest

from homebuilder_engines.forecasting import predict_completion_date
from homebuilder_engines.timeline import calculate_days_overdue, extract_timeline_metrics
from homebuilder_kernel.domain.snapshot import ProjectStatus


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestDurations:
    """Whole-day durations from start and end dates."""

    def test_scenario_durations(self, snapshot_factory, now):
        """Jan 1 to Mar 1 2024 is 60 days; Jan 1 to Feb 1 is 31."""
        metrics = extract_timeline_metrics(snapshot_factory(), now)

        assert metrics.original_duration_days == 60
        assert metrics.current_duration_days == 31
        assert metrics.days_overdue == 0

    def test_actual_start_preferred_over_estimate(self, snapshot_factory, now):
        snapshot = snapshot_factory(actual_start_date=utc(2024, 1, 11))

        metrics = extract_timeline_metrics(snapshot, now)

        assert metrics.original_duration_days == 50
        assert metrics.current_duration_days == 21

    def test_partial_day_rounds_up(self, snapshot_factory):
        metrics = extract_timeline_metrics(snapshot_factory(), utc(2024, 1, 1, 6))

        assert metrics.current_duration_days == 1

    def test_no_dates_gives_zero_durations(self, snapshot_factory, now):
        snapshot = snapshot_factory(estimated_start_date=None, estimated_end_date=None)

        metrics = extract_timeline_metrics(snapshot, now)

        assert metrics.original_duration_days == 0
        assert metrics.current_duration_days == 0
        assert metrics.days_overdue == 0

    def test_future_start_never_negative(self, snapshot_factory, now):
        snapshot = snapshot_factory(estimated_start_date=utc(2024, 6, 1))

        metrics = extract_timeline_metrics(snapshot, now)

        assert metrics.current_duration_days == 0
        assert metrics.original_duration_days == 0

    def test_actual_duration_only_when_complete(self, snapshot_factory, now):
        open_metrics = extract_timeline_metrics(snapshot_factory(), now)
        done_metrics = extract_timeline_metrics(
            snapshot_factory(status=ProjectStatus.COMPLETE), now,
        )

        assert open_metrics.actual_duration_days is None
        assert done_metrics.actual_duration_days == 31


class TestDaysOverdue:
    """Days past the estimated end date."""

    def test_overdue_open_project(self):
        assert calculate_days_overdue(
            utc(2024, 3, 1), ProjectStatus.IN_PROGRESS, utc(2024, 3, 11),
        ) == 10

    def test_partial_overdue_day_rounds_up(self):
        assert calculate_days_overdue(
            utc(2024, 3, 1), ProjectStatus.IN_PROGRESS, utc(2024, 3, 1, 1),
        ) == 1

    def test_complete_project_never_overdue(self):
        assert calculate_days_overdue(
            utc(2024, 3, 1), ProjectStatus.COMPLETE, utc(2024, 6, 1),
        ) == 0

    def test_not_yet_due(self):
        assert calculate_days_overdue(
            utc(2024, 3, 1), ProjectStatus.IN_PROGRESS, utc(2024, 2, 1),
        ) == 0

    def test_no_end_date(self):
        assert calculate_days_overdue(None, ProjectStatus.IN_PROGRESS, utc(2024, 2, 1)) == 0


class TestConfidenceAndForecast:
    """Confidence clamps and the velocity forecast."""

    def test_on_schedule_confidence_is_upper_clamp(self, snapshot_factory, now):
        metrics = extract_timeline_metrics(snapshot_factory(), now)

        assert metrics.confidence_level == 0.9

    def test_sixty_days_overdue_confidence_is_lower_clamp(self, snapshot_factory):
        metrics = extract_timeline_metrics(snapshot_factory(), utc(2024, 4, 30))

        assert metrics.days_overdue == 60
        assert metrics.confidence_level == 0.3

    def test_ten_days_overdue_confidence(self, snapshot_factory):
        metrics = extract_timeline_metrics(snapshot_factory(), utc(2024, 3, 11))

        assert metrics.confidence_level == pytest.approx(1 - 10 / 30)

    def test_forecast_uses_velocity(self, snapshot_factory, now):
        """50% in 31 days predicts 31 more days."""
        metrics = extract_timeline_metrics(snapshot_factory(), now)

        expected = now + timedelta(days=31)
        assert abs((metrics.predicted_completion_date - expected).total_seconds()) < 1

    def test_zero_completion_uses_fallback(self, snapshot_factory, now):
        metrics = extract_timeline_metrics(snapshot_factory(completion_percentage=0.0), now)

        assert metrics.predicted_completion_date == now + timedelta(days=30)

    def test_missing_completion_treated_as_zero(self, snapshot_factory, now):
        metrics = extract_timeline_metrics(snapshot_factory(completion_percentage=None), now)

        assert metrics.completion_percentage == 0.0

    def test_completion_clamped(self, snapshot_factory, now):
        metrics = extract_timeline_metrics(snapshot_factory(completion_percentage=140.0), now)

        assert metrics.completion_percentage == 100.0

    def test_matches_shared_forecast_helper(self, snapshot_factory):
        current = utc(2024, 3, 20)
        metrics = extract_timeline_metrics(snapshot_factory(), current)

        forecast = predict_completion_date(
            metrics.completion_percentage,
            current,
            days_elapsed=metrics.current_duration_days,
            days_overdue=metrics.days_overdue,
        )
        assert metrics.confidence_level == forecast.confidence
        assert metrics.predicted_completion_date == forecast.predicted_date
