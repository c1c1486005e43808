"""
models.py
Domain records (vehicles, payments, gold), input drafts and choice lists.
"""

from __future__ import annotations
from dataclasses import dataclass

VEHICLE_TYPES = ["Auto", "E-Rickshaw", "2W", "3W"]
FLEX_TYPES = ["Front", "Back", "Full Wrap"]
PAYMENT_MODES = ["Cash", "UPI", "Bank"]
PAYMENT_STATUSES = ["Paid", "Pending"]
GOLD_TYPES = ["22K", "24K"]
GOLD_PURPOSES = ["Sell", "Buy", "Repair"]

PAID = "Paid"
PENDING = "Pending"
BUY = "Buy"
SELL = "Sell"


@dataclass(frozen=True)
class Vehicle:
    id: str
    vehicle_type: str
    vehicle_number: str
    owner_name: str
    mobile_number: str
    flex_type: str
    flex_start_date: str
    monthly_amount: float
    area: str
    remarks: str
    created_at: str


@dataclass(frozen=True)
class Payment:
    id: str
    vehicle_id: str
    month: str  # YYYY-MM
    amount_paid: float
    payment_mode: str  # Cash/UPI/Bank
    payment_date: str  # empty while pending
    status: str  # 'Paid' or 'Pending'


@dataclass(frozen=True)
class GoldRecord:
    id: str
    customer_name: str
    mobile_number: str
    gold_type: str  # 22K/24K
    weight: float  # grams
    rate_per_gram: float
    total_value: float
    purpose: str  # Sell/Buy/Repair
    date: str
    remarks: str
    created_at: str


@dataclass(frozen=True)
class VehicleDraft:
    vehicle_type: str
    vehicle_number: str
    owner_name: str
    mobile_number: str
    flex_type: str
    flex_start_date: str
    monthly_amount: float
    area: str = ""
    remarks: str = ""


@dataclass(frozen=True)
class PaymentDraft:
    vehicle_id: str
    month: str
    amount_paid: float
    payment_mode: str
    payment_date: str
    status: str = PAID


@dataclass(frozen=True)
class GoldRecordDraft:
    customer_name: str
    mobile_number: str
    gold_type: str
    weight: float
    rate_per_gram: float
    purpose: str
    date: str
    remarks: str = ""


@dataclass(frozen=True)
class DashboardStats:
    total_vehicles: int
    paid_vehicles: int
    pending_payments: int
    monthly_collection: float
    gold_stock_value: float
    pending_alerts: int


@dataclass(frozen=True)
class GoldStock:
    total_weight_22k: float
    total_weight_24k: float
    total_value: float  # buys minus sells, signed
