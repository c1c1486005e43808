from __future__ import annotations

from datetime import date

import pytest

import stats
from models import DashboardStats, GoldRecord, Payment, Vehicle

TODAY = date(2026, 3, 10)


def _vehicle(vid: str, monthly: float = 1500.0) -> Vehicle:
    return Vehicle(vid, "Auto", f"UP32 {vid}", f"Owner {vid}", "9876543210", "Back", "2026-01-01", monthly, "Aminabad", "", "2026-01-01")


def _payment(pid: str, vehicle_id: str, month: str, status: str = "Paid", amount: float = 1500.0) -> Payment:
    return Payment(pid, vehicle_id, month, amount if status == "Paid" else 0.0, "UPI", "", status)


def _gold(rid: str, weight: float, rate: float, purpose: str, gold_type: str = "22K") -> GoldRecord:
    return GoldRecord(rid, "Customer", "9876543220", gold_type, weight, rate, weight * rate, purpose, "2026-03-01", "", "2026-03-01")


def test_empty_collections_give_zero_stats() -> None:
    assert stats.compute_dashboard_stats([], [], [], today=TODAY) == DashboardStats(0, 0, 0, 0.0, 0.0, 0)


def test_buy_minus_sell_stock_value() -> None:
    records = [_gold("1", 10, 5000, "Buy"), _gold("2", 4, 5000, "Sell")]
    s = stats.compute_dashboard_stats([], [], records, today=TODAY)
    assert s.gold_stock_value == 30000


def test_stock_value_is_absolute() -> None:
    records = [_gold("1", 2, 5000, "Buy"), _gold("2", 4, 5000, "Sell")]
    assert stats.compute_dashboard_stats([], [], records, today=TODAY).gold_stock_value == 10000
    assert stats.gold_stock(records).total_value == -10000


def test_equal_buys_and_sells_cancel_out() -> None:
    records = [
        _gold("1", 10, 5000, "Buy"),
        _gold("2", 5, 6200, "Sell", "24K"),
        _gold("3", 10, 5000, "Sell"),
        _gold("4", 5, 6200, "Buy", "24K"),
    ]
    assert stats.compute_dashboard_stats([], [], records, today=TODAY).gold_stock_value == 0


def test_repairs_do_not_touch_stock() -> None:
    records = [_gold("1", 10, 5000, "Buy"), _gold("2", 3, 5000, "Repair")]
    stock = stats.gold_stock(records)
    assert stock.total_value == 50000
    assert stock.total_weight_22k == 10
    assert stock.total_weight_24k == 0


def test_gold_stock_weights_by_type() -> None:
    records = [
        _gold("1", 10.5, 5800, "Sell"),
        _gold("2", 5.0, 6200, "Buy", "24K"),
        _gold("3", 2.5, 5800, "Buy"),
    ]
    stock = stats.gold_stock(records)
    assert stock.total_weight_22k == pytest.approx(-8.0)
    assert stock.total_weight_24k == pytest.approx(5.0)


def test_pending_payment_counts_as_pending_and_alert_not_collection() -> None:
    vehicles = [_vehicle("v1", monthly=1500)]
    payments = [_payment("p1", "v1", "2026-03", status="Pending")]

    s = stats.compute_dashboard_stats(vehicles, payments, [], today=TODAY)

    assert s.total_vehicles == 1
    assert s.pending_payments == 1
    assert s.pending_alerts == 1
    assert s.monthly_collection == 0
    assert s.paid_vehicles == 0


def test_year_policy_matches_any_month_of_current_year() -> None:
    vehicles = [_vehicle("v1"), _vehicle("v2"), _vehicle("v3")]
    payments = [
        _payment("p1", "v1", "2026-01", amount=1500),
        _payment("p2", "v1", "2026-02", amount=1500),
        _payment("p3", "v2", "2026-03", amount=800),
        _payment("p4", "v3", "2025-12", amount=500),
    ]

    s = stats.compute_dashboard_stats(vehicles, payments, [], policy="year", today=TODAY)

    assert s.paid_vehicles == 2
    assert s.monthly_collection == 3800


def test_month_policy_matches_exact_month_only() -> None:
    vehicles = [_vehicle("v1"), _vehicle("v2")]
    payments = [
        _payment("p1", "v1", "2026-02", amount=1500),
        _payment("p2", "v2", "2026-03", amount=800),
    ]

    s = stats.compute_dashboard_stats(vehicles, payments, [], policy="month", today=TODAY)

    assert s.paid_vehicles == 1
    assert s.monthly_collection == 800


def test_pending_counts_ignore_month_bucket() -> None:
    payments = [
        _payment("p1", "v1", "2024-03", status="Pending"),
        _payment("p2", "v2", "2026-03", status="Pending"),
    ]
    s = stats.compute_dashboard_stats([], payments, [], policy="month", today=TODAY)
    assert s.pending_payments == 2
    assert s.pending_alerts == 2


def test_dangling_payments_still_count() -> None:
    payments = [_payment("p1", "gone", "2026-03", amount=700)]
    s = stats.compute_dashboard_stats([], payments, [], today=TODAY)
    assert s.paid_vehicles == 1
    assert s.monthly_collection == 700


def test_unknown_policy_raises() -> None:
    with pytest.raises(ValueError):
        stats.month_matcher("quarter", TODAY)


def test_pending_amount_due_uses_vehicle_monthly_amount() -> None:
    vehicles = [_vehicle("v1", 1500), _vehicle("v2", 800)]
    payments = [
        _payment("p1", "v1", "2026-03", status="Pending"),
        _payment("p2", "v2", "2026-03", status="Pending"),
        _payment("p3", "gone", "2026-03", status="Pending"),
        _payment("p4", "v1", "2026-02"),
    ]
    assert stats.pending_amount_due(payments, vehicles) == 2300


def test_paid_collection_and_values_by_purpose() -> None:
    payments = [_payment("p1", "v1", "2026-01", amount=1500), _payment("p2", "v1", "2026-02", status="Pending")]
    assert stats.paid_collection(payments) == 1500
    records = [_gold("1", 10.5, 5800, "Sell"), _gold("2", 5, 6200, "Buy")]
    assert stats.gold_value_by_purpose(records, "Sell") == pytest.approx(60900)
    assert stats.gold_value_by_purpose(records, "Buy") == 31000
    assert stats.gold_value_by_purpose(records, "Repair") == 0


def test_vehicle_payment_status() -> None:
    payments = [_payment("p1", "v1", "2026-02"), _payment("p2", "v2", "2026-03", status="Pending")]
    assert stats.vehicle_payment_status("v1", payments, policy="year", today=TODAY) == "Paid"
    assert stats.vehicle_payment_status("v1", payments, policy="month", today=TODAY) == "Pending"
    assert stats.vehicle_payment_status("v2", payments, policy="year", today=TODAY) == "Pending"


def test_revenue_by_month() -> None:
    payments = [
        _payment("p1", "v1", "2026-01", amount=1500),
        _payment("p2", "v2", "2026-01", amount=800),
        _payment("p3", "v1", "2026-02", amount=1500),
        _payment("p4", "v1", "2026-03", status="Pending"),
    ]
    df = stats.revenue_by_month(payments)
    assert df["month"].tolist() == ["2026-02", "2026-01"]
    assert df["revenue"].tolist() == [1500, 2300]


def test_revenue_by_month_empty() -> None:
    df = stats.revenue_by_month([])
    assert df.empty
    assert list(df.columns) == ["month", "revenue"]
