"""
stats.py
Dashboard and report figures derived from the current collections.
All functions are pure and return zero values for empty input.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Sequence

import pandas as pd

import config
from models import BUY, PAID, PENDING, SELL, DashboardStats, GoldRecord, GoldStock, Payment, Vehicle

MONTH_POLICIES = ("year", "month")


def month_matcher(policy: str = config.MONTH_MATCH_POLICY, today: date | None = None) -> Callable[[str], bool]:
    """
    Build the "current month" predicate for a billing month string (YYYY-MM).

    - "year": the month starts with today's year, e.g. "2026-03" matches any day in 2026
    - "month": the month equals today's YYYY-MM
    """
    today = today or date.today()
    if policy == "year":
        prefix = f"{today.year:04d}"
        return lambda month: month.startswith(prefix)
    if policy == "month":
        current = today.strftime("%Y-%m")
        return lambda month: month == current
    raise ValueError(f"Unknown month policy: {policy!r} (expected one of {MONTH_POLICIES})")


def gold_value_by_purpose(records: Iterable[GoldRecord], purpose: str) -> float:
    return sum((r.total_value for r in records if r.purpose == purpose), 0.0)


def gold_stock(records: Sequence[GoldRecord]) -> GoldStock:
    def net_weight(gold_type: str) -> float:
        total = 0.0
        for r in records:
            if r.gold_type != gold_type:
                continue
            if r.purpose == BUY:
                total += r.weight
            elif r.purpose == SELL:
                total -= r.weight
        return total

    return GoldStock(
        total_weight_22k=net_weight("22K"),
        total_weight_24k=net_weight("24K"),
        total_value=gold_value_by_purpose(records, BUY) - gold_value_by_purpose(records, SELL),
    )


def paid_collection(payments: Iterable[Payment]) -> float:
    return sum((p.amount_paid for p in payments if p.status == PAID), 0.0)


def pending_amount_due(payments: Iterable[Payment], vehicles: Sequence[Vehicle]) -> float:
    """Sum of monthly charges for pending payments; dangling vehicle ids count as 0."""
    monthly = {v.id: v.monthly_amount for v in vehicles}
    return sum((monthly.get(p.vehicle_id, 0.0) for p in payments if p.status == PENDING), 0.0)


def vehicle_payment_status(
    vehicle_id: str,
    payments: Iterable[Payment],
    policy: str = config.MONTH_MATCH_POLICY,
    today: date | None = None,
) -> str:
    in_bucket = month_matcher(policy, today)
    for p in payments:
        if p.vehicle_id == vehicle_id and p.status == PAID and in_bucket(p.month):
            return PAID
    return PENDING


def compute_dashboard_stats(
    vehicles: Sequence[Vehicle],
    payments: Sequence[Payment],
    gold_records: Sequence[GoldRecord],
    policy: str = config.MONTH_MATCH_POLICY,
    today: date | None = None,
) -> DashboardStats:
    in_bucket = month_matcher(policy, today)
    paid_now = [p for p in payments if p.status == PAID and in_bucket(p.month)]
    pending = [p for p in payments if p.status == PENDING]
    stock = gold_stock(gold_records)

    return DashboardStats(
        total_vehicles=len(vehicles),
        paid_vehicles=len({p.vehicle_id for p in paid_now}),
        pending_payments=len(pending),
        monthly_collection=sum((p.amount_paid for p in paid_now), 0.0),
        gold_stock_value=abs(stock.total_value),
        pending_alerts=len(pending),
    )


def revenue_by_month(payments: Iterable[Payment]) -> pd.DataFrame:
    rows = [{"month": p.month, "revenue": p.amount_paid} for p in payments if p.status == PAID]
    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=["month", "revenue"])
    return df.groupby("month", as_index=False)["revenue"].sum().sort_values("month", ascending=False).reset_index(drop=True)
