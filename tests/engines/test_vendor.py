"""
Tests for the Vendor Extractor.

Covers:
- Supplier counting via budget line items
- Per-vendor on-time, quality and cost-efficiency scores
- MEASURED vs UNAVAILABLE aggregates
- Ranking of top vendors
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from homebuilder_engines.vendor import (
    cost_efficiency,
    extract_vendor_metrics,
    on_time_rate,
    quality_score,
    score_vendor,
)
from homebuilder_kernel.domain.metrics import DataSource
from homebuilder_kernel.domain.snapshot import BudgetLineItem, Delivery, Supplier


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


SUPPLIER_A = Supplier(
    id="s-a",
    name="Acme Lumber",
    deliveries=(
        Delivery(promised_date=utc(2024, 1, 10), actual_date=utc(2024, 1, 9)),
        Delivery(promised_date=utc(2024, 1, 20), actual_date=utc(2024, 1, 25)),
        Delivery(promised_date=utc(2024, 2, 5), actual_date=None),
    ),
    customer_satisfaction=Decimal("4.5"),
    defect_rate=Decimal("1"),
    rework_rate=Decimal("0.5"),
    market_rate=Decimal("100"),
    actual_rate=Decimal("90"),
)
SUPPLIER_B = Supplier(id="s-b", name="Bolt Supply", quoted_rate=Decimal("100"))
SUPPLIER_D = Supplier(id="s-d", name="Dormant Concrete")
UNREFERENCED = Supplier(
    id="s-c", name="Elsewhere Co",
    deliveries=(Delivery(promised_date=utc(2024, 1, 1), actual_date=utc(2024, 1, 30)),),
)


def line(item_id: str, supplier_id: str | None) -> BudgetLineItem:
    return BudgetLineItem(id=item_id, name=item_id, supplier_id=supplier_id)


class TestPerVendorScores:

    def test_on_time_ignores_undelivered(self):
        assert on_time_rate(SUPPLIER_A) == 50.0

    def test_on_time_without_deliveries(self):
        assert on_time_rate(SUPPLIER_B) is None

    def test_quality_formula(self):
        """4.5 * 20 - 1 * 10 - 0.5 * 15."""
        assert quality_score(SUPPLIER_A) == pytest.approx(72.5)

    def test_quality_defaults_satisfaction_to_five(self):
        supplier = Supplier(id="x", name="x", defect_rate=Decimal("2"))

        assert quality_score(supplier) == pytest.approx(80.0)

    def test_quality_clamped_at_zero(self):
        supplier = Supplier(id="x", name="x", customer_satisfaction=Decimal("0"),
                            defect_rate=Decimal("5"))

        assert quality_score(supplier) == 0.0

    def test_quality_without_data(self):
        assert quality_score(SUPPLIER_B) is None

    def test_cost_efficiency_below_market(self):
        assert cost_efficiency(SUPPLIER_A) == pytest.approx(60.0)

    def test_cost_efficiency_falls_back_to_quote(self):
        assert cost_efficiency(SUPPLIER_B) == pytest.approx(50.0)

    def test_cost_efficiency_clamped(self):
        supplier = Supplier(id="x", name="x", market_rate=Decimal("100"),
                            actual_rate=Decimal("400"))

        assert cost_efficiency(supplier) == 0.0

    def test_overall_is_mean_of_measured(self):
        performance = score_vendor(SUPPLIER_A)

        assert performance.overall_score == pytest.approx((50.0 + 72.5 + 60.0) / 3)

    def test_supplier_without_data_is_not_scored(self):
        assert score_vendor(SUPPLIER_D) is None


class TestVendorMetrics:

    def test_no_suppliers_uses_placeholders(self, snapshot_factory):
        metrics = extract_vendor_metrics(snapshot_factory())

        assert metrics.total_vendors == 0
        assert metrics.on_time_delivery_rate.value == 90.0
        assert metrics.quality_score.value == 85.0
        assert metrics.cost_efficiency.value == 80.0
        for value in (metrics.on_time_delivery_rate, metrics.quality_score, metrics.cost_efficiency):
            assert value.source == DataSource.UNAVAILABLE
        assert metrics.top_vendors == ()

    def test_counts_distinct_referenced_suppliers(self, snapshot_factory):
        snapshot = snapshot_factory(
            budget_items=(line("1", "s-a"), line("2", "s-a"), line("3", "s-b"),
                          line("4", "s-d"), line("5", None)),
            suppliers=(SUPPLIER_A, SUPPLIER_B, SUPPLIER_D, UNREFERENCED),
        )

        metrics = extract_vendor_metrics(snapshot)

        assert metrics.total_vendors == 3

    def test_measured_aggregates(self, snapshot_factory):
        snapshot = snapshot_factory(
            budget_items=(line("1", "s-a"), line("2", "s-b"), line("3", "s-d")),
            suppliers=(SUPPLIER_A, SUPPLIER_B, SUPPLIER_D, UNREFERENCED),
        )

        metrics = extract_vendor_metrics(snapshot)

        # Only s-a has deliveries; s-c is not on this project
        assert metrics.on_time_delivery_rate.value == 50.0
        assert metrics.on_time_delivery_rate.is_measured
        assert metrics.quality_score.value == pytest.approx(72.5)
        assert metrics.cost_efficiency.value == pytest.approx(55.0)
        assert [v.vendor_id for v in metrics.top_vendors] == ["s-a", "s-b"]

    def test_partial_data_mixes_sources(self, snapshot_factory):
        snapshot = snapshot_factory(
            budget_items=(line("1", "s-b"),),
            suppliers=(SUPPLIER_B,),
        )

        metrics = extract_vendor_metrics(snapshot)

        assert metrics.cost_efficiency.source == DataSource.MEASURED
        assert metrics.on_time_delivery_rate.source == DataSource.UNAVAILABLE
        assert metrics.quality_score.source == DataSource.UNAVAILABLE

    def test_ties_broken_by_supplier_id(self, snapshot_factory):
        first = Supplier(id="s-2", name="Second", quoted_rate=Decimal("10"))
        second = Supplier(id="s-1", name="First", quoted_rate=Decimal("20"))
        snapshot = snapshot_factory(
            budget_items=(line("1", "s-2"), line("2", "s-1")),
            suppliers=(first, second),
        )

        metrics = extract_vendor_metrics(snapshot)

        assert [v.vendor_id for v in metrics.top_vendors] == ["s-1", "s-2"]

    def test_custom_defaults(self, snapshot_factory):
        metrics = extract_vendor_metrics(snapshot_factory(), 70.0, 60.0, 50.0)

        assert metrics.on_time_delivery_rate.value == 70.0
        assert metrics.quality_score.value == 60.0
        assert metrics.cost_efficiency.value == 50.0
