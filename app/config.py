"""
Finance Tracker — Configuration: paths, constants, column-name conventions.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with FINANCE_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("FINANCE_DATA_DIR", str(Path.home() / ".finance-tracker")))
BASE_FOLDER = _data_dir
STORE_FILE = _data_dir / "store.json"
EXPORTS_FOLDER = _data_dir / "exports"

LOG_LEVEL = os.environ.get("FINANCE_LOG_LEVEL", "INFO")

# ---------------------------------------------------------------------------
# Statement import: accepted upload types
# ---------------------------------------------------------------------------
SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# ---------------------------------------------------------------------------
# Column-name probes for bank statements.
# Order matters: the first literal key present wins. Case variants are distinct
# keys, not a case-insensitive scan.
# ---------------------------------------------------------------------------
DATE_COLUMNS = ("Date", "date", "DATE", "Transaction Date", "transaction_date")
DESCRIPTION_COLUMNS = ("Description", "description", "DESCRIPTION", "Narration", "narration")
AMOUNT_COLUMNS = ("Amount", "amount", "AMOUNT")
DEBIT_COLUMNS = ("Debit", "debit", "DEBIT")
CREDIT_COLUMNS = ("Credit", "credit", "CREDIT")

IMPORT_NOTE = "Imported from bank statement"

# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------
DEFAULT_CURRENCY = "INR"
CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}

# ---------------------------------------------------------------------------
# Accounts & categories
# ---------------------------------------------------------------------------
ACCOUNT_TYPES = ("checking", "savings", "credit_card", "investment", "cash")
DEFAULT_CATEGORY_COLOR = "#6b7280"
UNCATEGORIZED = "Uncategorized"

# Chart colors for groups whose category carries no color of its own.
FALLBACK_COLORS = [
    "#8884d8",
    "#82ca9d",
    "#ffc658",
    "#ff7300",
    "#8dd1e1",
    "#d084d0",
    "#87d068",
]

# Seeded for every new user: (name, kind, color)
DEFAULT_ACCOUNT_NAME = "Main Account"
DEFAULT_CATEGORIES = [
    ("Salary", "income", "#10b981"),
    ("Freelance", "income", "#059669"),
    ("Investment", "income", "#047857"),
    ("Food & Dining", "expense", "#ef4444"),
    ("Transportation", "expense", "#f97316"),
    ("Shopping", "expense", "#8b5cf6"),
    ("Entertainment", "expense", "#ec4899"),
    ("Bills & Utilities", "expense", "#6366f1"),
    ("Healthcare", "expense", "#06b6d4"),
    ("Education", "expense", "#84cc16"),
]

# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------
DEFAULT_TRAILING_MONTHS = 6
