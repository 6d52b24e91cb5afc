"""
CSV exports for the working tube list and the MS pipe chart.

PDF output lives in backend.pdf_generator.
"""

import csv
import io
from datetime import date

from .config import settings
from .errors import EmptyCalculationError
from .ms_pipe import WALL_THICKNESSES, weight_chart, price_chart
from .tube_list import TubeList
from .weights import describe

CSV_HEADER = [
    "Shape",
    "Size",
    "Thickness (mm)",
    "Length (inches)",
    "Quantity",
    "Weight per Tube (kg)",
    "Total Weight (kg)",
]


def export_filename(extension: str, today: date = None) -> str:
    today = today or date.today()
    return f"steel_calculation_{today.isoformat()}.{extension}"


def _num(value) -> str:
    """3.0 -> '3', 2.5 -> '2.5'"""
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def tubes_to_csv(tubes: TubeList, price_per_kg: float, currency: str = None) -> str:
    """
    One row per tube plus a trailing total row.
    Raises EmptyCalculationError for an empty list.
    """
    if len(tubes) == 0:
        raise EmptyCalculationError("Add some tubes before exporting.")
    currency = settings.CURRENCY if currency is None else currency

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER + [f"Price ({currency})"])
    for item in tubes:
        total = item.weight_per_tube * item.quantity
        writer.writerow([
            item.spec.shape,
            describe(item.spec),
            _num(item.spec.thickness),
            _num(item.spec.length),
            _num(item.quantity),
            f"{item.weight_per_tube:.2f}",
            f"{total:.2f}",
            f"{total * price_per_kg:.2f}",
        ])
    total_weight = tubes.total_weight()
    writer.writerow([
        "", "", "", "", "Total:", "",
        f"{total_weight:.2f}",
        f"{total_weight * price_per_kg:.2f}",
    ])
    return out.getvalue()


def ms_pipe_chart_to_csv(shape: str, price_per_kg: float, density: float, currency: str = None) -> str:
    """Weight table then price table for one MS pipe shape, per 6 m pipe."""
    currency = settings.CURRENCY if currency is None else currency
    title = "Round" if shape == "round" else "Square"

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow([f"MS {title} Pipe Weight List (kg per 6 meter pipe)"])
    writer.writerow(["Size (Inch)", "Size (mm)"] + [f"{wt} mm (kg/6m)" for wt in WALL_THICKNESSES])
    for row in weight_chart(shape, density):
        writer.writerow([row["size_inch"], row["size_mm"]] + [row["weights"][str(wt)] for wt in WALL_THICKNESSES])

    writer.writerow([])
    writer.writerow([f"MS {title} Pipe Price List at {currency}{_num(price_per_kg)}/kg (per 6 meter pipe)"])
    writer.writerow(["Size (Inch)", "Size (mm)"] + [f"{wt} mm (Rate {currency})" for wt in WALL_THICKNESSES])
    for row in price_chart(shape, price_per_kg, density):
        writer.writerow([row["size_inch"], row["size_mm"]] + [row["prices"][str(wt)] for wt in WALL_THICKNESSES])
    return out.getvalue()
