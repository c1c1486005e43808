"""
app.py
Streamlit Flex & Gold Manager (admin-only).
Run: streamlit run app.py
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date

import pandas as pd
import streamlit as st

import auth
import config
import exports
import stats
import utils
from models import (
    BUY,
    FLEX_TYPES,
    GOLD_PURPOSES,
    GOLD_TYPES,
    PAID,
    PAYMENT_MODES,
    PAYMENT_STATUSES,
    PENDING,
    SELL,
    VEHICLE_TYPES,
)
from store import RecordStore

st.set_page_config(**config.PAGE_CONFIG)

logger = logging.getLogger(__name__)


def init_once():
    if "store" not in st.session_state:
        logging.basicConfig(
            level=config.LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        st.session_state.store = RecordStore.with_sample_data()
    if "month_policy" not in st.session_state:
        st.session_state.month_policy = config.MONTH_MATCH_POLICY


def get_store() -> RecordStore:
    return st.session_state.store


def require_login():
    if "logged_in" not in st.session_state:
        st.session_state.logged_in = False
    if "user" not in st.session_state:
        st.session_state.user = None


def logout():
    st.session_state.logged_in = False
    st.session_state.user = None
    st.success("Logged out.")


def login_screen():
    st.title(f"🔐 {config.APP_TITLE}")

    col1, col2 = st.columns([1, 1])
    with col1:
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.button("Login", type="primary"):
            if auth.login(email.strip(), password):
                st.session_state.logged_in = True
                st.session_state.user = auth.session_user()
                st.rerun()
            else:
                st.error("Invalid email or password.")

    with col2:
        st.info("Admin access only. Records live in this browser session and are lost when the tab is closed.")


def money(x: float) -> str:
    return f"{config.CURRENCY_SYMBOL}{x:,.0f}"


def show_errors(errors: list[utils.DraftError]) -> None:
    for e in errors:
        st.error(e.message)


def pick_one(label: str, labels: dict[str, str]) -> str | None:
    # options are ids so rows with identical labels stay selectable
    return st.selectbox(
        label,
        [None] + list(labels),
        format_func=lambda i: "(none)" if i is None else labels[i],
    )


def vehicles_df(rows) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": v.id,
                "vehicle_number": v.vehicle_number,
                "type": v.vehicle_type,
                "owner": v.owner_name,
                "mobile": v.mobile_number,
                "flex": v.flex_type,
                "monthly_amount": v.monthly_amount,
                "area": v.area,
                "remarks": v.remarks,
            }
            for v in rows
        ],
        columns=["id", "vehicle_number", "type", "owner", "mobile", "flex", "monthly_amount", "area", "remarks"],
    )


# ---------- Pages ----------

def dashboard_page():
    st.header("📊 Dashboard")
    store = get_store()
    s = stats.compute_dashboard_stats(
        store.vehicles, store.payments, store.gold_records, policy=st.session_state.month_policy
    )

    c1, c2, c3, c4, c5, c6 = st.columns(6)
    c1.metric("Total vehicles", s.total_vehicles)
    c2.metric("Paid vehicles", s.paid_vehicles)
    c3.metric("Pending payments", s.pending_payments)
    c4.metric("Monthly collection", money(s.monthly_collection))
    c5.metric("Gold stock value", money(s.gold_stock_value))
    c6.metric("Pending alerts", s.pending_alerts)

    st.divider()

    left, right = st.columns(2)
    with left:
        st.subheader("Pending payments")
        pending = [p for p in store.payments if p.status == PENDING]
        if pending:
            st.dataframe(
                pd.DataFrame(
                    [
                        {"vehicle": utils.vehicle_label(p.vehicle_id, store.vehicles), "month": p.month}
                        for p in pending
                    ]
                ),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.caption("No pending payments.")

    with right:
        st.subheader("Recent gold transactions")
        recent = list(reversed(store.gold_records[-3:]))
        if recent:
            st.dataframe(
                pd.DataFrame(
                    [
                        {"customer": r.customer_name, "type": r.gold_type, "weight": r.weight,
                         "purpose": r.purpose, "total": r.total_value}
                        for r in recent
                    ]
                ),
                use_container_width=True,
                hide_index=True,
            )
        else:
            st.caption("No gold transactions yet.")


def vehicle_form(existing=None):
    if existing:
        st.subheader(f"✏️ Edit Vehicle ({existing.vehicle_number})")
    else:
        st.subheader("➕ Add Vehicle")

    key = existing.id if existing else "new"
    col1, col2, col3 = st.columns(3)
    with col1:
        vehicle_type = st.selectbox(
            "Vehicle type", VEHICLE_TYPES,
            index=(VEHICLE_TYPES.index(existing.vehicle_type) if existing else 0), key=f"vt_{key}",
        )
        vehicle_number = st.text_input("Vehicle number", value=(existing.vehicle_number if existing else ""), key=f"vn_{key}")
        owner_name = st.text_input("Owner name", value=(existing.owner_name if existing else ""), key=f"on_{key}")

    with col2:
        mobile_number = st.text_input("Mobile number", value=(existing.mobile_number if existing else ""), key=f"mn_{key}")
        flex_type = st.selectbox(
            "Flex type", FLEX_TYPES,
            index=(FLEX_TYPES.index(existing.flex_type) if existing else FLEX_TYPES.index("Full Wrap")), key=f"ft_{key}",
        )
        start = utils.parse_iso(existing.flex_start_date) if existing and existing.flex_start_date else date.today()
        flex_start_date = st.date_input("Flex start date", value=start, key=f"fs_{key}").isoformat()

    with col3:
        monthly_amount = st.text_input(
            "Monthly amount", value=(f"{existing.monthly_amount:g}" if existing else ""), key=f"ma_{key}"
        )
        area = st.text_input("Area", value=(existing.area if existing else ""), key=f"ar_{key}")
        remarks = st.text_input("Remarks", value=(existing.remarks if existing else ""), key=f"rm_{key}")

    errors = utils.validate_vehicle_inputs(
        vehicle_type, vehicle_number, owner_name, mobile_number, flex_type, flex_start_date, monthly_amount
    )
    show_errors(errors)

    if st.button("Save", type="primary", disabled=bool(errors), key=f"save_{key}"):
        draft = utils.make_vehicle_draft(
            vehicle_type, vehicle_number, owner_name, mobile_number, flex_type, flex_start_date,
            monthly_amount, area, remarks,
        )
        store = get_store()
        if existing:
            store.update_vehicle(existing.id, **asdict(draft))
            st.session_state.edit_vehicle_id = None
            st.success("Vehicle updated successfully.")
        else:
            store.add_vehicle(draft)
            st.success("Vehicle added successfully.")
        st.rerun()


def vehicles_page():
    st.header("🛺 Flex Vehicles")
    store = get_store()

    with st.sidebar:
        st.subheader("Search & Filters")
        search = st.text_input("Search (number/owner/mobile)")
        type_filter = st.selectbox("Vehicle type", [utils.ALL] + VEHICLE_TYPES)
        area_filter = st.selectbox("Area", [utils.ALL] + utils.distinct_areas(store.vehicles))

    rows = utils.filter_vehicles(store.vehicles, search, type_filter, area_filter)
    df = vehicles_df(rows)
    df["status"] = [
        stats.vehicle_payment_status(v.id, store.payments, policy=st.session_state.month_policy) for v in rows
    ]
    st.caption(f"Vehicle list ({len(rows)})")
    st.dataframe(df.drop(columns=["id"]), use_container_width=True, hide_index=True)

    st.divider()

    colA, colB = st.columns([1, 2])
    with colA:
        st.subheader("Select vehicle")
        labels = utils.vehicle_choices(rows)
        vehicle_id = pick_one("Vehicle", labels)

    with colB:
        if vehicle_id is not None:
            st.subheader("Vehicle actions")
            c1, c2 = st.columns(2)
            with c1:
                if st.button("Edit"):
                    st.session_state.edit_vehicle_id = vehicle_id
                    st.rerun()
            with c2:
                delete_confirm = st.checkbox("Confirm delete (removes its payments too)", value=False, key="del_vehicle")
                if st.button("Delete", type="secondary", disabled=not delete_confirm):
                    store.delete_vehicle(vehicle_id)
                    st.success("Vehicle deleted.")
                    st.rerun()

    st.divider()

    if st.session_state.get("edit_vehicle_id"):
        existing = store.get_vehicle(st.session_state.edit_vehicle_id)
        if existing:
            vehicle_form(existing=existing)
        if st.button("Cancel edit"):
            st.session_state.edit_vehicle_id = None
            st.rerun()
    else:
        vehicle_form(existing=None)


def payments_page():
    st.header("💳 Payments")
    store = get_store()

    if not store.vehicles:
        st.info("No vehicles yet. Add a vehicle first.")

    with st.sidebar:
        st.subheader("Search & Filters")
        search = st.text_input("Search (number/owner)")
        status_filter = st.selectbox("Status", [utils.ALL] + PAYMENT_STATUSES)
        month_filter = st.selectbox("Month", [utils.ALL] + utils.distinct_months(store.payments))

    rows = utils.filter_payments(store.payments, store.vehicles, search, status_filter, month_filter)

    c1, c2, c3 = st.columns(3)
    c1.metric("Collection (filtered)", money(stats.paid_collection(rows)))
    c2.metric("Paid", sum(1 for p in rows if p.status == PAID))
    c3.metric("Pending", sum(1 for p in rows if p.status == PENDING))

    if store.vehicles:
        st.subheader("Record payment")
        labels = utils.vehicle_choices(store.vehicles)
        c1, c2, c3 = st.columns(3)
        with c1:
            vehicle_id = st.selectbox("Vehicle", list(labels), format_func=labels.get)
            month = st.text_input("Billing month (YYYY-MM)", value=utils.current_month())
        with c2:
            amount = st.text_input("Amount (blank = monthly amount)", value="")
            mode = st.selectbox("Payment mode", PAYMENT_MODES, index=PAYMENT_MODES.index("UPI"))
        with c3:
            status = st.selectbox("Status", PAYMENT_STATUSES)
            pay_date = st.date_input("Payment date", value=date.today()).isoformat()

        errors = utils.validate_payment_inputs(vehicle_id, month, amount, mode, pay_date, status)
        show_errors(errors)
        if st.button("Record payment", type="primary", disabled=bool(errors)):
            draft = utils.make_payment_draft(store.get_vehicle(vehicle_id), vehicle_id, month, amount, mode, pay_date, status)
            store.add_payment(draft)
            st.success("Payment recorded successfully.")
            st.rerun()

    st.divider()

    st.subheader(f"Payment records ({len(rows)})")
    if not rows:
        st.caption("No payments match the filters.")
        return

    st.dataframe(
        pd.DataFrame(
            [
                {
                    "vehicle": utils.vehicle_label(p.vehicle_id, store.vehicles),
                    "month": p.month,
                    "amount": p.amount_paid,
                    "mode": p.payment_mode,
                    "date": p.payment_date,
                    "status": p.status,
                }
                for p in rows
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

    labels = utils.payment_choices(rows, store.vehicles)
    payment_id = pick_one("Payment", labels)
    if payment_id is not None:
        payment = store.get_payment(payment_id)
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Mark paid", disabled=payment.status == PAID):
                store.mark_payment_paid(payment.id)
                st.success("Payment marked as paid.")
                st.rerun()
        with c2:
            confirm = st.checkbox("Confirm delete", value=False, key="del_payment")
            if st.button("Delete payment", disabled=not confirm):
                store.delete_payment(payment.id)
                st.success("Payment deleted.")
                st.rerun()


def gold_form(existing=None):
    if existing:
        st.subheader(f"✏️ Edit Gold Record ({existing.customer_name})")
    else:
        st.subheader("➕ Add Gold Record")

    key = existing.id if existing else "new"
    col1, col2, col3 = st.columns(3)
    with col1:
        customer_name = st.text_input("Customer name", value=(existing.customer_name if existing else ""), key=f"cn_{key}")
        mobile_number = st.text_input("Mobile number", value=(existing.mobile_number if existing else ""), key=f"gm_{key}")
        gold_type = st.selectbox(
            "Gold type", GOLD_TYPES, index=(GOLD_TYPES.index(existing.gold_type) if existing else 0), key=f"gt_{key}"
        )
    with col2:
        weight = st.text_input("Weight (g)", value=(f"{existing.weight:g}" if existing else ""), key=f"gw_{key}")
        rate = st.text_input("Rate per gram", value=(f"{existing.rate_per_gram:g}" if existing else ""), key=f"gr_{key}")
        purpose = st.selectbox(
            "Purpose", GOLD_PURPOSES, index=(GOLD_PURPOSES.index(existing.purpose) if existing else 0), key=f"gp_{key}"
        )
    with col3:
        record_date = st.date_input(
            "Date", value=(utils.parse_iso(existing.date) if existing else date.today()), key=f"gd_{key}"
        ).isoformat()
        remarks = st.text_input("Remarks", value=(existing.remarks if existing else ""), key=f"gx_{key}")

    errors = utils.validate_gold_inputs(customer_name, gold_type, weight, rate, purpose, record_date)
    if not errors:
        st.info(f"Total value: **{money(float(weight) * float(rate))}**")
    show_errors(errors)

    if st.button("Save", type="primary", disabled=bool(errors), key=f"gsave_{key}"):
        draft = utils.make_gold_draft(customer_name, mobile_number, gold_type, weight, rate, purpose, record_date, remarks)
        store = get_store()
        if existing:
            store.update_gold_record(existing.id, **asdict(draft))
            st.session_state.edit_gold_id = None
            st.success("Record updated successfully.")
        else:
            store.add_gold_record(draft)
            st.success("Gold record added successfully.")
        st.rerun()


def gold_page():
    st.header("🪙 Gold Management")
    store = get_store()

    stock = stats.gold_stock(store.gold_records)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("22K stock", f"{stock.total_weight_22k:.2f} g")
    c2.metric("24K stock", f"{stock.total_weight_24k:.2f} g")
    c3.metric("Total bought", money(stats.gold_value_by_purpose(store.gold_records, BUY)))
    c4.metric("Total sold", money(stats.gold_value_by_purpose(store.gold_records, SELL)))

    with st.sidebar:
        st.subheader("Search & Filters")
        search = st.text_input("Search (customer/mobile)")
        type_filter = st.selectbox("Gold type", [utils.ALL] + GOLD_TYPES)
        purpose_filter = st.selectbox("Purpose", [utils.ALL] + GOLD_PURPOSES)

    rows = utils.filter_gold_records(store.gold_records, search, type_filter, purpose_filter)
    st.dataframe(
        pd.DataFrame(
            [
                {"customer": r.customer_name, "mobile": r.mobile_number, "type": r.gold_type, "weight": r.weight,
                 "rate_per_gram": r.rate_per_gram, "total_value": r.total_value, "purpose": r.purpose,
                 "date": r.date, "remarks": r.remarks}
                for r in rows
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

    labels = utils.gold_choices(rows)
    record_id = pick_one("Record", labels)
    if record_id is not None:
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Edit record"):
                st.session_state.edit_gold_id = record_id
                st.rerun()
        with c2:
            confirm = st.checkbox("Confirm delete", value=False, key="del_gold")
            if st.button("Delete record", disabled=not confirm):
                store.delete_gold_record(record_id)
                st.success("Record deleted.")
                st.rerun()

    st.divider()

    if st.session_state.get("edit_gold_id"):
        existing = store.get_gold_record(st.session_state.edit_gold_id)
        if existing:
            gold_form(existing=existing)
        if st.button("Cancel edit"):
            st.session_state.edit_gold_id = None
            st.rerun()
    else:
        gold_form(existing=None)


def download_pair(name: str, pdf_bytes: bytes, xlsx_bytes: bytes):
    c1, c2 = st.columns(2)
    with c1:
        st.download_button("📄 Download PDF", data=pdf_bytes, file_name=f"{name}.pdf", mime=exports.PDF_MIME, key=f"{name}_pdf")
    with c2:
        st.download_button("📊 Download Excel", data=xlsx_bytes, file_name=f"{name}.xlsx", mime=exports.XLSX_MIME, key=f"{name}_xlsx")


def reports_page():
    st.header("🧾 Reports")
    store = get_store()

    paid = [p for p in store.payments if p.status == PAID]
    pending = [p for p in store.payments if p.status == PENDING]
    total_collection = stats.paid_collection(paid)
    total_pending = stats.pending_amount_due(pending, store.vehicles)
    total_buy = stats.gold_value_by_purpose(store.gold_records, BUY)
    total_sell = stats.gold_value_by_purpose(store.gold_records, SELL)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Flex collection", money(total_collection))
    c2.metric("Pending amount", money(total_pending))
    c3.metric("Gold bought", money(total_buy))
    c4.metric("Gold sold", money(total_sell))

    tab_flex, tab_pending, tab_gold = st.tabs(["Flex Collection", "Pending", "Gold"])

    with tab_flex:
        st.dataframe(exports.flex_collection_frame(paid, store.vehicles), use_container_width=True, hide_index=True)
        download_pair(
            "flex-collection-report",
            exports.flex_collection_pdf(paid, store.vehicles, total_collection),
            exports.flex_collection_excel(paid, store.vehicles, total_collection),
        )

    with tab_pending:
        st.dataframe(exports.pending_payments_frame(pending, store.vehicles), use_container_width=True, hide_index=True)
        download_pair(
            "pending-payments-report",
            exports.pending_payments_pdf(pending, store.vehicles, total_pending),
            exports.pending_payments_excel(pending, store.vehicles, total_pending),
        )

    with tab_gold:
        st.dataframe(exports.gold_report_frame(store.gold_records), use_container_width=True, hide_index=True)
        download_pair(
            "gold-transaction-report",
            exports.gold_report_pdf(store.gold_records, total_buy, total_sell),
            exports.gold_report_excel(store.gold_records, total_buy, total_sell),
        )

    st.divider()

    st.subheader("Revenue summary by month")
    st.dataframe(stats.revenue_by_month(store.payments), use_container_width=True, hide_index=True)


def settings_page():
    st.header("⚙️ Settings")

    st.subheader("Admin profile")
    user = st.session_state.user or {}
    c1, c2 = st.columns(2)
    c1.text_input("Name", value=user.get("name", config.ADMIN_NAME), disabled=True)
    c2.text_input("Email", value=user.get("email", ""), disabled=True)

    st.divider()

    st.subheader("Current-month matching")
    labels = {"year": "Same year (YYYY prefix)", "month": "Same month (YYYY-MM)"}
    policy = st.radio(
        "Count a payment as 'this month' when its billing month is in the",
        list(stats.MONTH_POLICIES),
        index=list(stats.MONTH_POLICIES).index(st.session_state.month_policy),
        format_func=labels.get,
    )
    st.session_state.month_policy = policy

    st.divider()

    st.subheader("Sample data")
    st.caption("Replace all records with the demo vehicles, payments and gold records.")
    confirm = st.checkbox("Confirm reset", value=False, key="reset_confirm")
    if st.button("Reset to sample data", disabled=not confirm):
        st.session_state.store = RecordStore.with_sample_data()
        st.success("Sample data loaded.")
        st.rerun()


def main_app():
    st.sidebar.title(f"{config.APP_ICON} Flex & Gold")
    st.sidebar.caption(f"Logged in as: {st.session_state.user['email']}")

    pages = {
        "Dashboard": dashboard_page,
        "Vehicles": vehicles_page,
        "Payments": payments_page,
        "Gold": gold_page,
        "Reports": reports_page,
        "Settings": settings_page,
    }
    names = list(pages)
    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", names, index=names.index(st.session_state.page))

    if st.sidebar.button("Logout"):
        logout()
        st.rerun()

    pages[st.session_state.page]()


# --------- App entry ---------

def run():
    init_once()
    require_login()

    if not st.session_state.logged_in:
        login_screen()
        return

    main_app()


if __name__ == "__main__":
    run()
