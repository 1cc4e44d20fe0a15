"""
Tests for the Completion Predictor.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from homebuilder_engines.budget import extract_budget_metrics
from homebuilder_engines.prediction import completion_bands, predict_completion
from homebuilder_engines.quality import extract_quality_metrics
from homebuilder_engines.risk import analyze_risk
from homebuilder_engines.team import extract_team_metrics
from homebuilder_engines.timeline import extract_timeline_metrics
from homebuilder_engines.vendor import extract_vendor_metrics
from homebuilder_kernel.domain.metrics import DataSource
from homebuilder_kernel.domain.snapshot import Issue, IssueCategory


def run_prediction(snapshot, now):
    timeline = extract_timeline_metrics(snapshot, now)
    budget = extract_budget_metrics(snapshot, now)
    quality = extract_quality_metrics(snapshot)
    risk = analyze_risk(
        timeline, budget, quality,
        extract_team_metrics(snapshot), extract_vendor_metrics(snapshot),
    )
    return timeline, predict_completion(timeline, budget, quality, risk, now)


class TestCompletionBands:

    def test_bands_from_upper_clamp(self):
        bands = completion_bands(0.9)

        assert bands.on_time == 0.9
        assert bands.within_1_week == 1.0
        assert bands.within_2_weeks == 1.0
        assert bands.within_1_month == 1.0
        assert bands.more_than_1_month == pytest.approx(0.1)

    def test_bands_from_lower_clamp(self):
        bands = completion_bands(0.3)

        assert bands.within_1_week == pytest.approx(0.4)
        assert bands.within_2_weeks == pytest.approx(0.5)
        assert bands.within_1_month == pytest.approx(0.6)
        assert bands.more_than_1_month == 1 - 0.3


class TestPredictCompletion:

    def test_on_time_matches_timeline_confidence(self, snapshot_factory):
        for now in (
            datetime(2024, 2, 1, tzinfo=timezone.utc),
            datetime(2024, 3, 8, tzinfo=timezone.utc),
            datetime(2024, 5, 1, tzinfo=timezone.utc),
        ):
            timeline, prediction = run_prediction(snapshot_factory(), now)

            assert prediction.completion_probability.on_time == timeline.confidence_level
            assert prediction.predicted_completion_date == timeline.predicted_completion_date

    def test_budget_overrun_risk(self, snapshot_factory, now):
        snapshot = snapshot_factory(
            original_budget=Decimal("100000"), spent_amount=Decimal("120000"),
        )

        _, prediction = run_prediction(snapshot, now)

        assert prediction.budget_overrun_risk == pytest.approx(30.0)

    def test_budget_overrun_risk_capped(self, snapshot_factory, now):
        """The default project is 60% under budget: 90, then 300% over caps at 100."""
        _, under = run_prediction(snapshot_factory(), now)
        _, over = run_prediction(
            snapshot_factory(original_budget=Decimal("100"), spent_amount=Decimal("400")), now,
        )

        assert under.budget_overrun_risk == pytest.approx(90.0)
        assert over.budget_overrun_risk == 100.0

    def test_quality_issues_probability_clamped(self, snapshot_factory, now):
        issues = tuple(
            Issue(id=str(i), title="Defect", category=IssueCategory.QUALITY) for i in range(30)
        )

        _, prediction = run_prediction(snapshot_factory(issues=issues), now)

        assert prediction.quality_issues_probability == 100.0

    def test_quality_issues_probability(self, snapshot_factory, now):
        issues = tuple(
            Issue(id=str(i), title="Defect", category=IssueCategory.QUALITY) for i in range(3)
        )

        _, prediction = run_prediction(snapshot_factory(issues=issues), now)

        assert prediction.quality_issues_probability == 15.0

    def test_weather_delay_is_placeholder(self, snapshot_factory, now):
        _, prediction = run_prediction(snapshot_factory(), now)

        assert prediction.weather_delay_risk.value == 20.0
        assert prediction.weather_delay_risk.source == DataSource.UNAVAILABLE

    def test_predicted_date_in_future(self, snapshot_factory, now):
        _, prediction = run_prediction(snapshot_factory(), now)

        assert prediction.predicted_completion_date > now
        assert prediction.predicted_completion_date < now + timedelta(days=32)
