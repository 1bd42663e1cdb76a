"""
Single source of truth for all Excel colors, fonts, fills, borders, alignments.
"""
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from app.config import CURRENCY_SYMBOLS, DEFAULT_CURRENCY

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
DARK_INDIGO = "312E81"
HEADER_BG = "312E81"
ALTERNATE_ROW = "F5F5F5"
WHITE = "FFFFFF"
BLACK = "000000"
GREEN = "059669"
LIGHT_GREEN = "ECFDF5"
RED = "DC2626"
LIGHT_RED = "FEF2F2"
TOTAL_ROW_BG = "E0E7FF"
GRAY_666 = "666666"

# ---------------------------------------------------------------------------
# Number formats
# ---------------------------------------------------------------------------
CURRENCY_FORMAT = f'"{CURRENCY_SYMBOLS.get(DEFAULT_CURRENCY, "")}"#,##0.00'
MONEY_FORMAT = "#,##0.00"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=DARK_INDIGO)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
SECTION_FONT = Font(name="Calibri", size=14, bold=True, color=DARK_INDIGO)
KPI_VALUE_FONT = Font(name="Calibri", size=22, bold=True, color=DARK_INDIGO)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY_666)
POSITIVE_KPI_FONT = Font(name="Calibri", size=22, bold=True, color=GREEN)
NEGATIVE_KPI_FONT = Font(name="Calibri", size=22, bold=True, color=RED)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=HEADER_BG, end_color=HEADER_BG, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
INCOME_FILL = PatternFill(start_color=LIGHT_GREEN, end_color=LIGHT_GREEN, fill_type="solid")
EXPENSE_FILL = PatternFill(start_color=LIGHT_RED, end_color=LIGHT_RED, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=DARK_INDIGO),
    right=Side(style="thin", color=DARK_INDIGO),
    top=Side(style="thin", color=DARK_INDIGO),
    bottom=Side(style="medium", color=DARK_INDIGO),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color="999999"),
    right=Side(style="thin", color="999999"),
    top=Side(style="medium", color="999999"),
    bottom=Side(style="medium", color="999999"),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# ---------------------------------------------------------------------------
# Highlight name → fill mapping
# ---------------------------------------------------------------------------
HIGHLIGHT_FILLS = {
    "income": INCOME_FILL,
    "expense": EXPENSE_FILL,
}
