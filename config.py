"""
config.py
App settings (title, admin credential, month policy, logging).
Values can be overridden through environment variables.
"""

from __future__ import annotations

import os

APP_TITLE = "Bharat Flex & Gold Manager"
APP_ICON = "🪙"

PAGE_CONFIG = {
    "page_title": APP_TITLE,
    "page_icon": APP_ICON,
    "layout": "wide",
    "initial_sidebar_state": "expanded",
}

# Single admin account
ADMIN_EMAIL = os.getenv("FLEX_ADMIN_EMAIL", "Admingold@gmail")
ADMIN_PASSWORD = os.getenv("FLEX_ADMIN_PASSWORD", "Gold98765")
ADMIN_NAME = "Admin"
BCRYPT_ROUNDS = int(os.getenv("FLEX_BCRYPT_ROUNDS", "12"))

# "year": payment month starts with the current year (YYYY)
# "month": payment month equals the current month (YYYY-MM)
MONTH_MATCH_POLICY = os.getenv("FLEX_MONTH_POLICY", "year")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CURRENCY_SYMBOL = "₹"
# PDF core fonts are latin-1 only
PDF_CURRENCY = "Rs."
