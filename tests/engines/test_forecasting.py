"""
Tests for the shared forecasting helpers.

Covers:
- Confidence decay and clamps
- Velocity-based completion date
- Forecast horizon cap
- Burn rate
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from homebuilder_engines.forecasting import (
    FALLBACK_DAYS_REMAINING,
    MAX_FORECAST_DAYS,
    calculate_burn_rate,
    ceil_days,
    confidence_from_overdue,
    predict_completion_date,
)

NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)


class TestConfidenceFromOverdue:

    @pytest.mark.parametrize("days_overdue,expected", [
        (0, 0.9),
        (3, 0.9),
        (6, 0.8),
        (15, 0.5),
        (21, 0.3),
        (60, 0.3),
    ])
    def test_linear_decay_with_clamps(self, days_overdue, expected):
        assert confidence_from_overdue(days_overdue) == pytest.approx(expected)

    def test_never_leaves_bounds(self):
        for days in range(0, 400, 7):
            assert 0.3 <= confidence_from_overdue(days) <= 0.9


class TestPredictCompletionDate:

    def test_velocity_forecast(self):
        forecast = predict_completion_date(25.0, NOW, days_elapsed=10)

        # 2.5% per day leaves 30 days for the remaining 75%
        assert forecast.days_remaining == pytest.approx(30.0)
        assert forecast.confidence == 0.9

    def test_zero_velocity_falls_back(self):
        forecast = predict_completion_date(0.0, NOW, days_elapsed=10)

        assert forecast.days_remaining == FALLBACK_DAYS_REMAINING
        assert forecast.predicted_date == NOW + timedelta(days=30)

    def test_elapsed_floor_of_one_day(self):
        forecast = predict_completion_date(50.0, NOW, days_elapsed=0)

        assert forecast.days_remaining == pytest.approx(1.0)

    def test_complete_project_forecasts_now(self):
        forecast = predict_completion_date(100.0, NOW, days_elapsed=90)

        assert forecast.predicted_date == NOW

    def test_tiny_velocity_is_capped(self):
        forecast = predict_completion_date(1e-9, NOW, days_elapsed=10_000)

        assert forecast.days_remaining == MAX_FORECAST_DAYS

    def test_confidence_tracks_overdue(self):
        forecast = predict_completion_date(50.0, NOW, days_elapsed=30, days_overdue=60)

        assert forecast.confidence == 0.3


class TestCeilDays:

    def test_rounds_up(self):
        assert ceil_days(NOW, NOW + timedelta(hours=1)) == 1

    def test_exact_days(self):
        assert ceil_days(NOW, NOW + timedelta(days=3)) == 3

    def test_negative_is_zero(self):
        assert ceil_days(NOW, NOW - timedelta(days=3)) == 0


class TestBurnRate:

    def test_spend_per_day(self):
        rate = calculate_burn_rate(Decimal("3100"), NOW - timedelta(days=31), NOW)

        assert rate == Decimal("100.00")

    def test_no_start_date(self):
        assert calculate_burn_rate(Decimal("5000"), None, NOW) == Decimal("0")

    def test_floored_at_one_day(self):
        rate = calculate_burn_rate(Decimal("500"), NOW - timedelta(hours=2), NOW)

        assert rate == Decimal("500.00")

    def test_future_start_floored_at_one_day(self):
        rate = calculate_burn_rate(Decimal("500"), NOW + timedelta(days=5), NOW)

        assert rate == Decimal("500.00")
