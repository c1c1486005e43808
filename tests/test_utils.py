from __future__ import annotations

from datetime import date

import pytest

import utils
from models import GoldRecord, Payment, Vehicle
from utils import DraftError


def _vehicle(vid: str, number: str, owner: str, mobile: str, vtype: str = "Auto", area: str = "Hazratganj") -> Vehicle:
    return Vehicle(vid, vtype, number, owner, mobile, "Back", "2026-01-01", 1000.0, area, "", "2026-01-01")


VEHICLES = [
    _vehicle("1", "UP32 AB 1234", "Rajesh Kumar", "9876543210"),
    _vehicle("2", "UP32 CD 5678", "Amit Singh", "9876543211", "E-Rickshaw", "Aminabad"),
    _vehicle("3", "UP32 EF 9012", "Priya Sharma", "9876543212", "2W", "Gomti Nagar"),
]


def test_vehicle_inputs_valid() -> None:
    assert utils.validate_vehicle_inputs("Auto", "UP32 AB 1234", "Rajesh", "98765", "Front", "2026-01-15", "1500") == []


def test_vehicle_inputs_required_fields() -> None:
    errors = utils.validate_vehicle_inputs("Auto", " ", "", "", "Front", "", "")
    assert errors == [
        DraftError.VEHICLE_NUMBER_REQUIRED,
        DraftError.OWNER_NAME_REQUIRED,
        DraftError.MOBILE_NUMBER_REQUIRED,
    ]


@pytest.mark.parametrize("amount", ["-1", "abc", "nan", "inf", "-inf"])
def test_vehicle_inputs_reject_bad_amount(amount: str) -> None:
    errors = utils.validate_vehicle_inputs("Auto", "N", "O", "M", "Front", "", amount)
    assert errors == [DraftError.INVALID_MONTHLY_AMOUNT]


def test_vehicle_inputs_reject_unknown_choices_and_dates() -> None:
    errors = utils.validate_vehicle_inputs("Truck", "N", "O", "M", "Side", "15/01/2026", "10")
    assert errors == [DraftError.INVALID_VEHICLE_TYPE, DraftError.INVALID_FLEX_TYPE, DraftError.INVALID_DATE]


def test_error_messages_are_user_facing() -> None:
    assert DraftError.OWNER_NAME_REQUIRED.message == "Owner name is required."


def test_make_vehicle_draft_normalises() -> None:
    draft = utils.make_vehicle_draft("Auto", " up32 ab 1234 ", " Rajesh ", " 98765 ", "Front", "2026-01-15", "", " Aminabad ")
    assert draft.vehicle_number == "UP32 AB 1234"
    assert draft.owner_name == "Rajesh"
    assert draft.monthly_amount == 0.0
    assert draft.area == "Aminabad"
    assert draft.remarks == ""


def test_payment_inputs() -> None:
    assert utils.validate_payment_inputs("1", "2026-03", "", "UPI", "2026-03-05") == []
    assert utils.validate_payment_inputs("", "", "x", "Card", "2026-03-05", "Late") == [
        DraftError.VEHICLE_REQUIRED,
        DraftError.MONTH_REQUIRED,
        DraftError.INVALID_AMOUNT,
        DraftError.INVALID_PAYMENT_MODE,
        DraftError.INVALID_STATUS,
    ]
    assert utils.validate_payment_inputs("1", "2026-13", "10", "Cash", "2026-03-05") == [DraftError.INVALID_MONTH]


def test_payment_draft_falls_back_to_monthly_amount() -> None:
    vehicle = VEHICLES[0]
    draft = utils.make_payment_draft(vehicle, vehicle.id, "2026-03", "", "UPI", "2026-03-05")
    assert draft.amount_paid == 1000.0
    assert draft.status == "Paid"
    assert draft.payment_date == "2026-03-05"

    explicit = utils.make_payment_draft(vehicle, vehicle.id, "2026-03", "750", "Cash", "2026-03-05")
    assert explicit.amount_paid == 750.0


def test_pending_payment_draft_has_no_amount_or_date() -> None:
    draft = utils.make_payment_draft(VEHICLES[0], "1", "2026-03", "900", "Cash", "2026-03-05", status="Pending")
    assert draft.amount_paid == 0.0
    assert draft.payment_date == ""


def test_payment_draft_without_vehicle() -> None:
    draft = utils.make_payment_draft(None, "gone", "2026-03", "", "Cash", "2026-03-05")
    assert draft.amount_paid == 0.0


def test_gold_inputs() -> None:
    assert utils.validate_gold_inputs("Sunita", "22K", "10.5", "5800", "Sell", "2026-03-01") == []
    assert utils.validate_gold_inputs("", "18K", "0", "", "Gift", "") == [
        DraftError.CUSTOMER_NAME_REQUIRED,
        DraftError.INVALID_GOLD_TYPE,
        DraftError.INVALID_WEIGHT,
        DraftError.INVALID_RATE,
        DraftError.INVALID_PURPOSE,
        DraftError.INVALID_DATE,
    ]


@pytest.mark.parametrize("amount", ["nan", "inf"])
def test_payment_inputs_reject_non_finite_amount(amount: str) -> None:
    assert utils.validate_payment_inputs("1", "2026-03", amount, "Cash", "2026-03-05") == [DraftError.INVALID_AMOUNT]


@pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-inf", "1e999"])
def test_gold_inputs_reject_non_finite_numbers(value: str) -> None:
    assert utils.validate_gold_inputs("Sunita", "22K", value, "5000", "Buy", "2026-03-01") == [DraftError.INVALID_WEIGHT]
    assert utils.validate_gold_inputs("Sunita", "22K", "10", value, "Buy", "2026-03-01") == [DraftError.INVALID_RATE]


def test_make_gold_draft_parses_numbers() -> None:
    draft = utils.make_gold_draft(" Sunita ", "", "22K", "10.5", "5800", "Sell", "2026-03-01")
    assert draft.customer_name == "Sunita"
    assert draft.weight == 10.5
    assert draft.rate_per_gram == 5800.0


def test_filter_vehicles() -> None:
    assert [v.id for v in utils.filter_vehicles(VEHICLES, "amit")] == ["2"]
    assert [v.id for v in utils.filter_vehicles(VEHICLES, "ef 90")] == ["3"]
    assert [v.id for v in utils.filter_vehicles(VEHICLES, "9876543210")] == ["1"]
    assert [v.id for v in utils.filter_vehicles(VEHICLES, vehicle_type="2W")] == ["3"]
    assert [v.id for v in utils.filter_vehicles(VEHICLES, area="Aminabad")] == ["2"]
    assert utils.filter_vehicles(VEHICLES, "amit", vehicle_type="Auto") == []
    assert len(utils.filter_vehicles(VEHICLES)) == 3


def test_filter_payments() -> None:
    payments = [
        Payment("p1", "1", "2026-02", 1000.0, "UPI", "2026-02-10", "Paid"),
        Payment("p2", "2", "2026-03", 0.0, "Cash", "", "Pending"),
        Payment("p3", "gone", "2026-03", 0.0, "Cash", "", "Pending"),
    ]
    assert [p.id for p in utils.filter_payments(payments, VEHICLES, search="rajesh")] == ["p1"]
    assert [p.id for p in utils.filter_payments(payments, VEHICLES, status="Pending")] == ["p2", "p3"]
    assert [p.id for p in utils.filter_payments(payments, VEHICLES, month="2026-03", status="Pending")] == ["p2", "p3"]
    # a search never matches a payment whose vehicle is gone
    assert [p.id for p in utils.filter_payments(payments, VEHICLES, search="UP32")] == ["p1", "p2"]
    assert utils.distinct_months(payments) == ["2026-03", "2026-02"]


def test_filter_gold_records() -> None:
    records = [
        GoldRecord("g1", "Sunita Devi", "9876543220", "22K", 10.5, 5800, 60900, "Sell", "2026-02-20", "", "2026-02-20"),
        GoldRecord("g2", "Ramesh Gupta", "9876543221", "24K", 5.0, 6200, 31000, "Buy", "2026-02-22", "", "2026-02-22"),
    ]
    assert [r.id for r in utils.filter_gold_records(records, "SUNITA")] == ["g1"]
    assert [r.id for r in utils.filter_gold_records(records, "3221")] == ["g2"]
    assert [r.id for r in utils.filter_gold_records(records, gold_type="24K")] == ["g2"]
    assert [r.id for r in utils.filter_gold_records(records, purpose="Sell")] == ["g1"]


def test_vehicle_label_and_areas() -> None:
    assert utils.vehicle_label("1", VEHICLES) == "UP32 AB 1234 (Rajesh Kumar)"
    assert utils.vehicle_label("gone", VEHICLES) == "Unknown"
    assert utils.distinct_areas(VEHICLES) == ["Aminabad", "Gomti Nagar", "Hazratganj"]


def test_dates() -> None:
    assert utils.current_month(date(2026, 3, 10)) == "2026-03"
    assert utils.parse_iso("2026-03-10") == date(2026, 3, 10)


def test_choices_keep_rows_with_identical_labels_apart() -> None:
    twins = VEHICLES + [_vehicle("4", "UP32 AB 1234", "Rajesh Kumar", "9876543299")]
    vehicles = utils.vehicle_choices(twins)
    assert list(vehicles) == ["1", "2", "3", "4"]
    assert vehicles["1"] == vehicles["4"] == "UP32 AB 1234 (Rajesh Kumar)"

    payments = [
        Payment("p1", "gone", "2026-03", 0.0, "Cash", "", "Pending"),
        Payment("p2", "gone", "2026-03", 0.0, "Cash", "", "Pending"),
    ]
    choices = utils.payment_choices(payments, VEHICLES)
    assert list(choices) == ["p1", "p2"]
    assert choices["p1"] == choices["p2"] == "Unknown - 2026-03 [Pending]"

    records = [
        GoldRecord("g1", "Sunita Devi", "", "22K", 10.5, 5800, 60900, "Sell", "2026-02-20", "", "2026-02-20"),
        GoldRecord("g2", "Sunita Devi", "", "22K", 10.5, 5800, 60900, "Sell", "2026-02-20", "", "2026-02-20"),
    ]
    assert utils.gold_choices(records) == {
        "g1": "Sunita Devi - Sell 10.5g (2026-02-20)",
        "g2": "Sunita Devi - Sell 10.5g (2026-02-20)",
    }
