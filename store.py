"""
store.py
In-memory record store (vehicles, payments, gold records) for one session.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict, replace
from datetime import date, timedelta
from typing import Callable

from models import (
    PAID,
    PENDING,
    GoldRecord,
    GoldRecordDraft,
    Payment,
    PaymentDraft,
    Vehicle,
    VehicleDraft,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


class RecordStore:
    """
    Holds the three collections and the mutators the pages call.

    Collections are replaced (never edited in place) on every mutation, so
    a tuple handed out earlier stays a valid snapshot.
    """

    def __init__(
        self,
        vehicles: list[Vehicle] | None = None,
        payments: list[Payment] | None = None,
        gold_records: list[GoldRecord] | None = None,
        id_factory: Callable[[], str] = new_id,
        today: Callable[[], date] = date.today,
    ):
        self._vehicles: list[Vehicle] = list(vehicles or [])
        self._payments: list[Payment] = list(payments or [])
        self._gold_records: list[GoldRecord] = list(gold_records or [])
        self._new_id = id_factory
        self._today = today

    # ---------- Read access ----------

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._vehicles)

    @property
    def payments(self) -> tuple[Payment, ...]:
        return tuple(self._payments)

    @property
    def gold_records(self) -> tuple[GoldRecord, ...]:
        return tuple(self._gold_records)

    def get_vehicle(self, vehicle_id: str) -> Vehicle | None:
        return next((v for v in self._vehicles if v.id == vehicle_id), None)

    def get_payment(self, payment_id: str) -> Payment | None:
        return next((p for p in self._payments if p.id == payment_id), None)

    def get_gold_record(self, record_id: str) -> GoldRecord | None:
        return next((r for r in self._gold_records if r.id == record_id), None)

    def payments_for_vehicle(self, vehicle_id: str) -> list[Payment]:
        return [p for p in self._payments if p.vehicle_id == vehicle_id]

    # ---------- Vehicles ----------

    def add_vehicle(self, draft: VehicleDraft) -> None:
        vehicle = Vehicle(id=self._new_id(), created_at=self._today().isoformat(), **asdict(draft))
        self._vehicles = self._vehicles + [vehicle]
        logger.info("Vehicle %s added (%s)", vehicle.id, vehicle.vehicle_number)

    def update_vehicle(self, vehicle_id: str, **changes) -> None:
        self._vehicles = _merge(self._vehicles, vehicle_id, changes, "vehicle")

    def delete_vehicle(self, vehicle_id: str) -> None:
        before = len(self._vehicles)
        self._vehicles = [v for v in self._vehicles if v.id != vehicle_id]
        if len(self._vehicles) == before:
            logger.debug("delete_vehicle: no vehicle with id %s", vehicle_id)
        # payments go with their vehicle
        kept = [p for p in self._payments if p.vehicle_id != vehicle_id]
        removed = len(self._payments) - len(kept)
        self._payments = kept
        logger.info("Vehicle %s deleted with %d payment(s)", vehicle_id, removed)

    # ---------- Payments ----------

    def add_payment(self, draft: PaymentDraft) -> None:
        payment = Payment(id=self._new_id(), **asdict(draft))
        self._payments = self._payments + [payment]
        logger.info("Payment %s added for vehicle %s (%s, %s)", payment.id, payment.vehicle_id, payment.month, payment.status)

    def update_payment(self, payment_id: str, **changes) -> None:
        self._payments = _merge(self._payments, payment_id, changes, "payment")

    def delete_payment(self, payment_id: str) -> None:
        before = len(self._payments)
        self._payments = [p for p in self._payments if p.id != payment_id]
        if len(self._payments) == before:
            logger.debug("delete_payment: no payment with id %s", payment_id)
        else:
            logger.info("Payment %s deleted", payment_id)

    def mark_payment_paid(self, payment_id: str, today: date | None = None) -> None:
        """
        Settle a pending payment at the vehicle's monthly amount, in cash, today.
        """
        payment = self.get_payment(payment_id)
        if payment is None:
            logger.debug("mark_payment_paid: no payment with id %s", payment_id)
            return
        vehicle = self.get_vehicle(payment.vehicle_id)
        self.update_payment(
            payment_id,
            status=PAID,
            amount_paid=(vehicle.monthly_amount if vehicle else 0.0),
            payment_date=(today or self._today()).isoformat(),
            payment_mode="Cash",
        )

    # ---------- Gold ----------

    def add_gold_record(self, draft: GoldRecordDraft) -> None:
        record = GoldRecord(
            id=self._new_id(),
            total_value=draft.weight * draft.rate_per_gram,
            created_at=self._today().isoformat(),
            **asdict(draft),
        )
        self._gold_records = self._gold_records + [record]
        logger.info("Gold record %s added (%s %sg)", record.id, record.purpose, record.weight)

    def update_gold_record(self, record_id: str, **changes) -> None:
        def recompute(record: GoldRecord) -> GoldRecord:
            if "weight" in changes or "rate_per_gram" in changes:
                return replace(record, total_value=record.weight * record.rate_per_gram)
            return record

        self._gold_records = _merge(self._gold_records, record_id, changes, "gold record", after=recompute)

    def delete_gold_record(self, record_id: str) -> None:
        before = len(self._gold_records)
        self._gold_records = [r for r in self._gold_records if r.id != record_id]
        if len(self._gold_records) == before:
            logger.debug("delete_gold_record: no record with id %s", record_id)
        else:
            logger.info("Gold record %s deleted", record_id)

    # ---------- Sample data ----------

    @classmethod
    def with_sample_data(cls, today: date | None = None, **kwargs) -> "RecordStore":
        """
        Demo data: 3 vehicles, 6 payments (2 pending) and 3 gold records,
        dated over the last three months.
        """
        store = cls(**kwargs)
        today = today or store._today()
        this_month = today.replace(day=1)
        last_month = (this_month - timedelta(days=1)).replace(day=1)
        two_back = (last_month - timedelta(days=1)).replace(day=1)

        def ym(d: date) -> str:
            return d.strftime("%Y-%m")

        def on(d: date, day: int) -> str:
            return d.replace(day=day).isoformat()

        vehicles = [
            Vehicle(store._new_id(), "Auto", "UP32 AB 1234", "Rajesh Kumar", "9876543210", "Full Wrap",
                    on(two_back, 15), 1500.0, "Hazratganj", "Premium location", on(two_back, 15)),
            Vehicle(store._new_id(), "E-Rickshaw", "UP32 CD 5678", "Amit Singh", "9876543211", "Back",
                    on(last_month, 1), 800.0, "Aminabad", "", on(last_month, 1)),
            Vehicle(store._new_id(), "2W", "UP32 EF 9012", "Priya Sharma", "9876543212", "Front",
                    on(last_month, 15), 500.0, "Gomti Nagar", "Daily commuter route", on(last_month, 15)),
        ]
        v1, v2, v3 = (v.id for v in vehicles)
        payments = [
            Payment(store._new_id(), v1, ym(two_back), 1500.0, "UPI", on(two_back, 20), PAID),
            Payment(store._new_id(), v1, ym(last_month), 1500.0, "Cash", on(last_month, 18), PAID),
            Payment(store._new_id(), v2, ym(last_month), 800.0, "Bank", on(last_month, 25), PAID),
            Payment(store._new_id(), v1, ym(this_month), 0.0, "Cash", "", PENDING),
            Payment(store._new_id(), v2, ym(this_month), 0.0, "UPI", "", PENDING),
            Payment(store._new_id(), v3, ym(last_month), 500.0, "UPI", on(last_month, 28), PAID),
        ]
        gold = [
            GoldRecord(store._new_id(), "Sunita Devi", "9876543220", "22K", 10.5, 5800.0, 10.5 * 5800.0,
                       "Sell", on(last_month, 20), "Wedding jewelry", on(last_month, 20)),
            GoldRecord(store._new_id(), "Ramesh Gupta", "9876543221", "24K", 5.0, 6200.0, 5.0 * 6200.0,
                       "Buy", on(last_month, 22), "Investment", on(last_month, 22)),
            GoldRecord(store._new_id(), "Meera Patel", "9876543222", "22K", 2.5, 5800.0, 2.5 * 5800.0,
                       "Repair", on(last_month, 25), "Chain repair", on(last_month, 25)),
        ]
        store._vehicles = vehicles
        store._payments = payments
        store._gold_records = gold
        logger.info("Sample data loaded: %d vehicles, %d payments, %d gold records",
                    len(vehicles), len(payments), len(gold))
        return store


def _merge(items: list, item_id: str, changes: dict, kind: str, after=None) -> list:
    """
    Return a new list with `changes` merged into the item with `item_id`.
    The id itself is never overwritten.
    """
    changes = {k: v for k, v in changes.items() if k != "id"}
    out = []
    found = False
    for item in items:
        if item.id == item_id:
            item = replace(item, **changes)
            if after is not None:
                item = after(item)
            found = True
        out.append(item)
    if found:
        logger.info("Updated %s %s: %s", kind, item_id, ", ".join(sorted(changes)))
    else:
        logger.debug("update: no %s with id %s", kind, item_id)
    return out
