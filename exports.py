"""
exports.py
PDF and Excel downloads for the three reports (flex collection, pending
payments, gold transactions). Inputs are read only.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Sequence

import pandas as pd
from fpdf import FPDF
from fpdf.enums import XPos, YPos
from openpyxl.utils import get_column_letter

import config
from models import GoldRecord, Payment, Vehicle

logger = logging.getLogger(__name__)

HEADER_FILL = (26, 32, 44)
GREEN = (34, 197, 94)
RED = (239, 68, 68)
AMBER = (234, 179, 8)


# ==============================================================================
# TABLE BUILDERS
# ==============================================================================

def _vehicle_index(vehicles: Sequence[Vehicle]) -> dict[str, Vehicle]:
    return {v.id: v for v in vehicles}


def flex_collection_frame(payments: Sequence[Payment], vehicles: Sequence[Vehicle]) -> pd.DataFrame:
    by_id = _vehicle_index(vehicles)
    rows = []
    for p in payments:
        v = by_id.get(p.vehicle_id)
        rows.append({
            "Vehicle": v.vehicle_number if v else "-",
            "Owner": v.owner_name if v else "-",
            "Month": p.month,
            "Amount": p.amount_paid,
            "Mode": p.payment_mode,
            "Date": p.payment_date,
        })
    return pd.DataFrame(rows, columns=["Vehicle", "Owner", "Month", "Amount", "Mode", "Date"])


def pending_payments_frame(payments: Sequence[Payment], vehicles: Sequence[Vehicle]) -> pd.DataFrame:
    by_id = _vehicle_index(vehicles)
    rows = []
    for p in payments:
        v = by_id.get(p.vehicle_id)
        rows.append({
            "Vehicle": v.vehicle_number if v else "-",
            "Owner": v.owner_name if v else "-",
            "Mobile": v.mobile_number if v else "-",
            "Area": v.area if v else "-",
            "Month": p.month,
            "Due": v.monthly_amount if v else 0.0,
        })
    return pd.DataFrame(rows, columns=["Vehicle", "Owner", "Mobile", "Area", "Month", "Due"])


def gold_report_frame(records: Sequence[GoldRecord]) -> pd.DataFrame:
    rows = [
        {
            "Customer": r.customer_name,
            "Type": r.gold_type,
            "Weight": r.weight,
            "Rate/g": r.rate_per_gram,
            "Total": r.total_value,
            "Purpose": r.purpose,
            "Date": r.date,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["Customer", "Type", "Weight", "Rate/g", "Total", "Purpose", "Date"])


# ==============================================================================
# PDF
# ==============================================================================

def pdf_sanitize(text) -> str:
    """Core PDF fonts are latin-1 only."""
    return str(text).replace(config.CURRENCY_SYMBOL, config.PDF_CURRENCY).encode("latin-1", "replace").decode("latin-1")


def money(x: float, symbol: str = config.PDF_CURRENCY) -> str:
    return f"{symbol}{x:,.0f}" if float(x).is_integer() else f"{symbol}{x:,.2f}"


class ReportPDF(FPDF):
    """A4 report with the business name on top and a page/date footer."""

    def __init__(self, subtitle: str):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.subtitle = subtitle

    def header(self):
        self.set_font("Helvetica", "B", 18)
        self.set_text_color(*HEADER_FILL)
        self.cell(0, 9, pdf_sanitize(config.APP_TITLE), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font("Helvetica", "", 13)
        self.set_text_color(100)
        self.cell(0, 8, pdf_sanitize(self.subtitle), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font("Helvetica", "", 9)
        self.cell(0, 6, f"Generated: {datetime.now().strftime('%d/%m/%Y')}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(3)

    def footer(self):
        self.set_y(-14)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(120)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")

    def fit_text(self, text: str, width: float) -> str:
        """Trim `text` with "..." so it fits a cell of `width` mm in the current font."""
        room = width - 2 * self.c_margin
        if self.get_string_width(text) <= room:
            return text
        while text and self.get_string_width(text + "...") > room:
            text = text[:-1]
        return text + "..."

    def striped_table(self, df: pd.DataFrame, widths: Sequence[float], formats: dict | None = None, font_size: int = 9):
        formats = formats or {}
        self.set_font("Helvetica", "B", font_size)
        self.set_text_color(255)
        self.set_fill_color(*HEADER_FILL)
        for col, w in zip(df.columns, widths):
            self.cell(w, 7, self.fit_text(pdf_sanitize(col), w), border=1, fill=True)
        self.ln()

        self.set_font("Helvetica", "", font_size)
        self.set_text_color(0)
        alt = False
        for _, row in df.iterrows():
            self.set_fill_color(240, 240, 240) if alt else self.set_fill_color(255, 255, 255)
            for col, w in zip(df.columns, widths):
                fmt = formats.get(col, str)
                self.cell(w, 7, self.fit_text(pdf_sanitize(fmt(row[col])), w), border=1, fill=alt)
            self.ln()
            alt = not alt

    def total_band(self, text: str, color: tuple, x: float = 14, w: float = 182, dark_text: bool = False):
        self.ln(6)
        y = self.get_y()
        self.set_fill_color(*color)
        self.rect(x, y, w, 12, "F")
        self.set_xy(x + 6, y + 2)
        self.set_font("Helvetica", "B", 11)
        self.set_text_color(*(HEADER_FILL if dark_text else (255, 255, 255)))
        self.cell(w - 12, 8, pdf_sanitize(text))
        self.set_y(y + 12)


def _pdf_bytes(pdf: FPDF) -> bytes:
    return bytes(pdf.output())


def flex_collection_pdf(payments: Sequence[Payment], vehicles: Sequence[Vehicle], total_collection: float) -> bytes:
    df = flex_collection_frame(payments, vehicles)
    pdf = ReportPDF("Monthly Flex Collection Report")
    pdf.add_page()
    pdf.striped_table(df, widths=[32, 40, 24, 30, 24, 30], formats={"Amount": money})
    pdf.total_band(f"Total Collection: {money(total_collection)}", GREEN)
    logger.info("Flex collection PDF built (%d rows)", len(df))
    return _pdf_bytes(pdf)


def pending_payments_pdf(payments: Sequence[Payment], vehicles: Sequence[Vehicle], total_pending: float) -> bytes:
    df = pending_payments_frame(payments, vehicles)
    pdf = ReportPDF("Pending Payment List")
    pdf.add_page()
    pdf.striped_table(df, widths=[32, 38, 28, 30, 22, 30], formats={"Due": money})
    pdf.total_band(f"Total Pending: {money(total_pending)}", RED)
    logger.info("Pending payments PDF built (%d rows)", len(df))
    return _pdf_bytes(pdf)


def gold_report_pdf(records: Sequence[GoldRecord], total_buy: float, total_sell: float) -> bytes:
    df = gold_report_frame(records)
    pdf = ReportPDF("Gold Transaction Report")
    pdf.add_page()
    pdf.striped_table(
        df,
        widths=[40, 16, 20, 26, 30, 22, 26],
        formats={"Weight": lambda w: f"{w}g", "Rate/g": money, "Total": money},
        font_size=8,
    )
    pdf.ln(6)
    y = pdf.get_y()
    pdf.total_band(f"Total Bought: {money(total_buy)}", GREEN, x=14, w=89)
    pdf.set_y(y)
    pdf.total_band(f"Total Sold: {money(total_sell)}", AMBER, x=107, w=89, dark_text=True)
    logger.info("Gold report PDF built (%d rows)", len(df))
    return _pdf_bytes(pdf)


# ==============================================================================
# EXCEL
# ==============================================================================

def _excel_bytes(df: pd.DataFrame, sheet_name: str, widths: Sequence[int], totals: Sequence[tuple[str, str, float]]) -> bytes:
    """
    Write `df` to a single sheet, then place each (label, column, value)
    total one blank row below the table, one per row.
    """
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        ws = writer.sheets[sheet_name]
        for i, w in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(i)].width = w
        first_total_row = len(df) + 3  # header + data + blank row
        for offset, (label, column, value) in enumerate(totals):
            row = first_total_row + offset
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=df.columns.get_loc(column) + 1, value=float(value))
    return buf.getvalue()


def flex_collection_excel(payments: Sequence[Payment], vehicles: Sequence[Vehicle], total_collection: float) -> bytes:
    df = flex_collection_frame(payments, vehicles)
    logger.info("Flex collection workbook built (%d rows)", len(df))
    return _excel_bytes(df, "Flex Collection", [15, 20, 12, 12, 10, 12], [("Total Collection:", "Amount", total_collection)])


def pending_payments_excel(payments: Sequence[Payment], vehicles: Sequence[Vehicle], total_pending: float) -> bytes:
    df = pending_payments_frame(payments, vehicles)
    logger.info("Pending payments workbook built (%d rows)", len(df))
    return _excel_bytes(df, "Pending Payments", [15, 20, 15, 15, 12, 12], [("Total Pending:", "Due", total_pending)])


def gold_report_excel(records: Sequence[GoldRecord], total_buy: float, total_sell: float) -> bytes:
    df = gold_report_frame(records)
    logger.info("Gold report workbook built (%d rows)", len(df))
    return _excel_bytes(
        df,
        "Gold Transactions",
        [20, 8, 10, 12, 12, 10, 12],
        [("Total Bought:", "Total", total_buy), ("Total Sold:", "Total", total_sell)],
    )


XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIME = "application/pdf"
