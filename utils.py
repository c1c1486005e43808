"""
utils.py
Validation, form-to-draft conversion, list filters, dates.
"""

from __future__ import annotations

import math
import re
from datetime import date
from enum import Enum
from typing import Iterable, Sequence

from models import (
    FLEX_TYPES,
    GOLD_PURPOSES,
    GOLD_TYPES,
    PAID,
    PAYMENT_MODES,
    PAYMENT_STATUSES,
    PENDING,
    VEHICLE_TYPES,
    GoldRecord,
    GoldRecordDraft,
    Payment,
    PaymentDraft,
    Vehicle,
    VehicleDraft,
)

ALL = "All"
UNKNOWN_VEHICLE = "Unknown"

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class DraftError(Enum):
    VEHICLE_NUMBER_REQUIRED = "Vehicle number is required."
    OWNER_NAME_REQUIRED = "Owner name is required."
    MOBILE_NUMBER_REQUIRED = "Mobile number is required."
    INVALID_VEHICLE_TYPE = "Unknown vehicle type."
    INVALID_FLEX_TYPE = "Unknown flex type."
    INVALID_MONTHLY_AMOUNT = "Monthly amount must be a number >= 0."
    VEHICLE_REQUIRED = "Please select a vehicle."
    MONTH_REQUIRED = "Billing month is required."
    INVALID_MONTH = "Billing month must look like YYYY-MM."
    INVALID_AMOUNT = "Amount must be a number >= 0."
    INVALID_PAYMENT_MODE = "Unknown payment mode."
    INVALID_STATUS = "Unknown payment status."
    CUSTOMER_NAME_REQUIRED = "Customer name is required."
    INVALID_GOLD_TYPE = "Unknown gold type."
    INVALID_WEIGHT = "Weight must be a number > 0."
    INVALID_RATE = "Rate per gram must be a number > 0."
    INVALID_PURPOSE = "Unknown purpose."
    INVALID_DATE = "Dates must be valid ISO dates (YYYY-MM-DD)."

    @property
    def message(self) -> str:
        return self.value


# ---------- Dates ----------

def today_iso() -> str:
    return date.today().isoformat()


def current_month(today: date | None = None) -> str:
    return (today or date.today()).strftime("%Y-%m")


def parse_iso(d: str) -> date:
    return date.fromisoformat(d)


def _is_iso_date(d: str) -> bool:
    try:
        parse_iso(d)
        return True
    except (TypeError, ValueError):
        return False


def _to_float(value) -> float | None:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # "nan" and "inf" parse but are not amounts
    return number if math.isfinite(number) else None


def _blank(value) -> bool:
    return not str(value or "").strip()


# ---------- Validation ----------

def validate_vehicle_inputs(
    vehicle_type: str,
    vehicle_number: str,
    owner_name: str,
    mobile_number: str,
    flex_type: str,
    flex_start_date: str,
    monthly_amount,
) -> list[DraftError]:
    errors: list[DraftError] = []
    if vehicle_type not in VEHICLE_TYPES:
        errors.append(DraftError.INVALID_VEHICLE_TYPE)
    if _blank(vehicle_number):
        errors.append(DraftError.VEHICLE_NUMBER_REQUIRED)
    if _blank(owner_name):
        errors.append(DraftError.OWNER_NAME_REQUIRED)
    if _blank(mobile_number):
        errors.append(DraftError.MOBILE_NUMBER_REQUIRED)
    if flex_type not in FLEX_TYPES:
        errors.append(DraftError.INVALID_FLEX_TYPE)
    # monthly amount may be left blank (treated as 0)
    amount = 0.0 if _blank(monthly_amount) else _to_float(monthly_amount)
    if amount is None or amount < 0:
        errors.append(DraftError.INVALID_MONTHLY_AMOUNT)
    if flex_start_date and not _is_iso_date(flex_start_date):
        errors.append(DraftError.INVALID_DATE)
    return errors


def validate_payment_inputs(
    vehicle_id: str,
    month: str,
    amount_paid,
    payment_mode: str,
    payment_date: str,
    status: str = PAID,
) -> list[DraftError]:
    errors: list[DraftError] = []
    if _blank(vehicle_id):
        errors.append(DraftError.VEHICLE_REQUIRED)
    if _blank(month):
        errors.append(DraftError.MONTH_REQUIRED)
    elif not _MONTH_RE.match(month.strip()):
        errors.append(DraftError.INVALID_MONTH)
    if not _blank(amount_paid):
        amount = _to_float(amount_paid)
        if amount is None or amount < 0:
            errors.append(DraftError.INVALID_AMOUNT)
    if payment_mode not in PAYMENT_MODES:
        errors.append(DraftError.INVALID_PAYMENT_MODE)
    if status not in PAYMENT_STATUSES:
        errors.append(DraftError.INVALID_STATUS)
    if status == PAID and payment_date and not _is_iso_date(payment_date):
        errors.append(DraftError.INVALID_DATE)
    return errors


def validate_gold_inputs(
    customer_name: str,
    gold_type: str,
    weight,
    rate_per_gram,
    purpose: str,
    record_date: str,
) -> list[DraftError]:
    errors: list[DraftError] = []
    if _blank(customer_name):
        errors.append(DraftError.CUSTOMER_NAME_REQUIRED)
    if gold_type not in GOLD_TYPES:
        errors.append(DraftError.INVALID_GOLD_TYPE)
    w = _to_float(weight)
    if w is None or w <= 0:
        errors.append(DraftError.INVALID_WEIGHT)
    r = _to_float(rate_per_gram)
    if r is None or r <= 0:
        errors.append(DraftError.INVALID_RATE)
    if purpose not in GOLD_PURPOSES:
        errors.append(DraftError.INVALID_PURPOSE)
    if not _is_iso_date(record_date):
        errors.append(DraftError.INVALID_DATE)
    return errors


# ---------- Drafts (call after validation passes) ----------

def make_vehicle_draft(
    vehicle_type: str,
    vehicle_number: str,
    owner_name: str,
    mobile_number: str,
    flex_type: str,
    flex_start_date: str,
    monthly_amount,
    area: str = "",
    remarks: str = "",
) -> VehicleDraft:
    return VehicleDraft(
        vehicle_type=vehicle_type,
        vehicle_number=vehicle_number.strip().upper(),
        owner_name=owner_name.strip(),
        mobile_number=mobile_number.strip(),
        flex_type=flex_type,
        flex_start_date=(flex_start_date or "").strip(),
        monthly_amount=_to_float(monthly_amount) or 0.0,
        area=(area or "").strip(),
        remarks=(remarks or "").strip(),
    )


def make_payment_draft(
    vehicle: Vehicle | None,
    vehicle_id: str,
    month: str,
    amount_paid,
    payment_mode: str,
    payment_date: str,
    status: str = PAID,
) -> PaymentDraft:
    """
    A pending payment records nothing paid yet. A paid payment with a blank
    or zero amount is taken at the vehicle's monthly charge.
    """
    if status == PENDING:
        amount, paid_on = 0.0, ""
    else:
        amount = _to_float(amount_paid) or (vehicle.monthly_amount if vehicle else 0.0)
        paid_on = (payment_date or "").strip()
    return PaymentDraft(
        vehicle_id=vehicle_id,
        month=month.strip(),
        amount_paid=amount,
        payment_mode=payment_mode,
        payment_date=paid_on,
        status=status,
    )


def make_gold_draft(
    customer_name: str,
    mobile_number: str,
    gold_type: str,
    weight,
    rate_per_gram,
    purpose: str,
    record_date: str,
    remarks: str = "",
) -> GoldRecordDraft:
    return GoldRecordDraft(
        customer_name=customer_name.strip(),
        mobile_number=(mobile_number or "").strip(),
        gold_type=gold_type,
        weight=_to_float(weight) or 0.0,
        rate_per_gram=_to_float(rate_per_gram) or 0.0,
        purpose=purpose,
        date=record_date,
        remarks=(remarks or "").strip(),
    )


# ---------- Filters ----------

def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def filter_vehicles(
    vehicles: Iterable[Vehicle], search: str = "", vehicle_type: str = ALL, area: str = ALL
) -> list[Vehicle]:
    q = search.strip()
    out = []
    for v in vehicles:
        if q and not (_contains(v.vehicle_number, q) or _contains(v.owner_name, q) or q in v.mobile_number):
            continue
        if vehicle_type != ALL and v.vehicle_type != vehicle_type:
            continue
        if area != ALL and v.area != area:
            continue
        out.append(v)
    return out


def filter_payments(
    payments: Iterable[Payment],
    vehicles: Sequence[Vehicle],
    search: str = "",
    status: str = ALL,
    month: str = ALL,
) -> list[Payment]:
    by_id = {v.id: v for v in vehicles}
    q = search.strip()
    out = []
    for p in payments:
        if q:
            v = by_id.get(p.vehicle_id)
            if v is None or not (_contains(v.vehicle_number, q) or _contains(v.owner_name, q)):
                continue
        if status != ALL and p.status != status:
            continue
        if month != ALL and p.month != month:
            continue
        out.append(p)
    return out


def filter_gold_records(
    records: Iterable[GoldRecord], search: str = "", gold_type: str = ALL, purpose: str = ALL
) -> list[GoldRecord]:
    q = search.strip()
    out = []
    for r in records:
        if q and not (_contains(r.customer_name, q) or q in r.mobile_number):
            continue
        if gold_type != ALL and r.gold_type != gold_type:
            continue
        if purpose != ALL and r.purpose != purpose:
            continue
        out.append(r)
    return out


def distinct_areas(vehicles: Iterable[Vehicle]) -> list[str]:
    return sorted({v.area for v in vehicles if v.area})


def distinct_months(payments: Iterable[Payment]) -> list[str]:
    return sorted({p.month for p in payments}, reverse=True)


def vehicle_label(vehicle_id: str, vehicles: Sequence[Vehicle]) -> str:
    v = next((v for v in vehicles if v.id == vehicle_id), None)
    if v is None:
        return UNKNOWN_VEHICLE
    return f"{v.vehicle_number} ({v.owner_name})"


# ---------- Select options (keyed by id; labels may repeat) ----------

def vehicle_choices(vehicles: Iterable[Vehicle]) -> dict[str, str]:
    return {v.id: f"{v.vehicle_number} ({v.owner_name})" for v in vehicles}


def payment_choices(payments: Iterable[Payment], vehicles: Sequence[Vehicle]) -> dict[str, str]:
    return {p.id: f"{vehicle_label(p.vehicle_id, vehicles)} - {p.month} [{p.status}]" for p in payments}


def gold_choices(records: Iterable[GoldRecord]) -> dict[str, str]:
    return {r.id: f"{r.customer_name} - {r.purpose} {r.weight:g}g ({r.date})" for r in records}
