"""
PDF export of a tube calculation.

Uses fpdf2 (pure Python, no system dependencies).

Layout:
1. Title, date, calculation name, price per kg, material
2. Tube table (page breaks handled by fpdf2 auto page break)
3. Totals row
"""

from datetime import datetime

from fpdf import FPDF

from .config import settings
from .errors import EmptyCalculationError
from .tube_list import TubeList
from .weights import describe, is_standard_catalog_match


def _fmt(amount, currency: str = "") -> str:
    """Format a number as <currency>X,XXX.XX"""
    try:
        return f"{currency}{float(amount):,.2f}"
    except (ValueError, TypeError):
        return f"{currency}0.00"


def _num(value) -> str:
    try:
        value = float(value)
    except (ValueError, TypeError):
        return "-"
    return str(int(value)) if value.is_integer() else f"{value:g}"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("₹", "Rs.")  # rupee sign
        .replace("•", "-")    # bullet
        .replace("—", " - ")  # em dash
        .replace("–", "-")    # en dash
        .replace("“", '"')    # left double quote
        .replace("”", '"')    # right double quote
        .replace("‘", "'")    # left single quote
        .replace("’", "'")    # right single quote
        .replace("³", "3")    # superscript three
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


# (label, width mm), sums to the 190 mm printable width of A4 portrait
TUBE_COLUMNS = [
    ("Shape", 24),
    ("Size", 30),
    ("Thick(mm)", 20),
    ("Length(in)", 22),
    ("Qty", 14),
    ("Wt/Tube(kg)", 25),
    ("Total Wt(kg)", 25),
    ("Price", 30),
]


class CalculationPDF(FPDF):
    """Tube calculation document."""

    def __init__(self, title=""):
        super().__init__()
        self.title_text = title
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Title is drawn once on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def table_header(self, cols):
        """Render a table header row. cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for i, (label, width) in enumerate(cols):
            align = "R" if i >= 2 else "L"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths, bold=False):
        """Render a table data row; numeric columns right-aligned."""
        self.set_font("Helvetica", "B" if bold else "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i >= 2 else "L"
            self.cell(width, 5.5, _safe(str(val)), align=align)
        self.ln()


def generate_calculation_pdf(
    tubes: TubeList,
    price_per_kg: float,
    calculation_name: str = "",
    material: str = "",
    currency: str = None,
    generated_at: datetime = None,
) -> bytes:
    """
    Generate the PDF for a tube list.

    Raises EmptyCalculationError for an empty list.
    Returns PDF bytes.
    """
    if len(tubes) == 0:
        raise EmptyCalculationError("Add some tubes before exporting.")
    currency = _safe(settings.CURRENCY if currency is None else currency)
    generated_at = generated_at or datetime.now()

    pdf = CalculationPDF(title="Steel Tube Weight Calculation")
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Title ──
    pdf.set_font("Helvetica", "B", 18)
    pdf.cell(0, 10, pdf.title_text, align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    pdf.set_font("Helvetica", "", 11)
    pdf.cell(0, 6, f"Date: {generated_at.strftime('%B %d, %Y')}", new_x="LMARGIN", new_y="NEXT")
    if calculation_name:
        pdf.cell(0, 6, _safe(f"Calculation: {calculation_name}"), new_x="LMARGIN", new_y="NEXT")
    if material:
        pdf.cell(0, 6, _safe(f"Material: {material}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 6, f"Price per kg: {_fmt(price_per_kg, currency)}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    # ── Tubes ──
    cols = [(label if label != "Price" else f"Price({currency})", width) for label, width in TUBE_COLUMNS]
    widths = [c[1] for c in cols]
    pdf.table_header(cols)

    has_catalog_items = False
    for item in tubes:
        total = item.weight_per_tube * item.quantity
        label = describe(item.spec)
        if is_standard_catalog_match(item.spec):
            label += " *"
            has_catalog_items = True
        pdf.table_row(
            [
                item.spec.shape,
                label,
                _num(item.spec.thickness),
                _num(item.spec.length),
                _num(item.quantity),
                f"{item.weight_per_tube:.2f}",
                f"{total:.2f}",
                f"{total * price_per_kg:.2f}",
            ],
            widths,
        )

    # ── Totals ──
    total_weight = tubes.total_weight()
    pdf.set_draw_color(200, 200, 200)
    pdf.line(pdf.l_margin, pdf.get_y() + 1, pdf.w - pdf.r_margin, pdf.get_y() + 1)
    pdf.ln(3)
    pdf.table_row(
        ["", "", "", "", "TOTAL:", "", f"{total_weight:.2f}", f"{total_weight * price_per_kg:.2f}"],
        widths,
        bold=True,
    )

    if has_catalog_items:
        pdf.ln(4)
        pdf.set_font("Helvetica", "I", 8)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 4, "* Weight from standard pipe weight table", new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)

    return bytes(pdf.output())
