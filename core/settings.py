# core/settings.py
"""
Central configuration for the LoanBook dashboard.
Every value can be overridden through environment variables.
"""

import os
from pathlib import Path

# ==================================================
# BACKEND SERVICE
# ==================================================
API_BASE_URL = os.environ.get("LOANBOOK_API_URL", "http://localhost:5000").rstrip("/")
API_TIMEOUT_SECONDS = float(os.environ.get("LOANBOOK_API_TIMEOUT", "10"))

# ==================================================
# EXPORTS
# ==================================================
EXPORT_DIR = Path(os.environ.get("LOANBOOK_EXPORT_DIR", "data/exports"))

# ==================================================
# LOGGING
# ==================================================
LOG_LEVEL = os.environ.get("LOANBOOK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ==================================================
# DISPLAY
# ==================================================
CURRENCY_SYMBOL = "₹"
TREND_MONTHS = 6
