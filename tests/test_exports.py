"""
CSV and PDF exports.
"""

import csv
import io
from datetime import date

import pytest

from backend.errors import EmptyCalculationError
from backend.exporters import export_filename, ms_pipe_chart_to_csv, tubes_to_csv
from backend.pdf_generator import generate_calculation_pdf
from backend.schemas import RoundSpec, SheetSpec
from backend.tube_list import TubeList


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def _tubes():
    tubes = TubeList()
    tubes.add(RoundSpec(size=1.0, thickness=1.2, length=100), 2, 7.85)
    tubes.add(SheetSpec(width=24, length=96, thickness=2.0), 1, 7.85)
    return tubes


def test_export_filename():
    assert export_filename("csv", date(2024, 1, 31)) == "steel_calculation_2024-01-31.csv"


def test_tubes_to_csv():
    rows = _rows(tubes_to_csv(_tubes(), 260, currency="Rs."))
    assert rows[0] == [
        "Shape", "Size", "Thickness (mm)", "Length (inches)", "Quantity",
        "Weight per Tube (kg)", "Total Weight (kg)", "Price (Rs.)",
    ]
    assert rows[1] == ["round", '1"', "1.2", "100", "2", "1.82", "3.64", "946.40"]
    assert rows[2] == ["sheet", '24" × 96"', "2", "96", "1", "25.40", "25.40", "6604.00"]
    assert rows[3] == ["", "", "", "", "Total:", "", "29.04", "7550.40"]
    assert len(rows) == 4


def test_empty_list_cannot_be_exported():
    with pytest.raises(EmptyCalculationError):
        tubes_to_csv(TubeList(), 260)
    with pytest.raises(EmptyCalculationError):
        generate_calculation_pdf(TubeList(), 260)


def test_generate_pdf_bytes():
    pdf = generate_calculation_pdf(_tubes(), 260, calculation_name="Gate", material="stainless-steel")
    assert isinstance(pdf, bytes)
    assert pdf.startswith(b"%PDF-")


def test_pdf_with_catalog_items_and_long_list():
    tubes = TubeList()
    for _ in range(80):
        tubes.add(RoundSpec(size=2.0, thickness=2.0, length=240), 1, 7.85)
    assert generate_calculation_pdf(tubes, 260, currency="₹").startswith(b"%PDF-")


def test_ms_pipe_chart_csv():
    rows = _rows(ms_pipe_chart_to_csv("round", 260, 7.85, currency="Rs."))
    assert rows[0] == ["MS Round Pipe Weight List (kg per 6 meter pipe)"]
    assert rows[1][:3] == ["Size (Inch)", "Size (mm)", "1.0 mm (kg/6m)"]
    one_inch = next(r for r in rows[2:] if r and r[0] == '1"')
    assert one_inch[3] == "4.297"
    price_title = next(i for i, r in enumerate(rows) if r and r[0].startswith("MS Round Pipe Price List"))
    assert rows[price_title][0] == "MS Round Pipe Price List at Rs.260/kg (per 6 meter pipe)"
    one_inch_price = next(r for r in rows[price_title + 2:] if r[0] == '1"')
    assert one_inch_price[3] == "1117.16"


# ============================================================
# API
# ============================================================

def test_csv_endpoint(client, add_tube, round_tube):
    add_tube(round_tube)
    response = client.get("/api/exports/csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="steel_calculation_' in response.headers["content-disposition"]
    rows = _rows(response.text)
    assert rows[0][-1] == "Price (₹)"
    assert rows[-1][4] == "Total:"
    assert rows[-1][-2:] == ["3.64", "946.40"]


def test_pdf_endpoint(client, add_tube, round_tube):
    add_tube(round_tube)
    response = client.get("/api/exports/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"].endswith('.pdf"')
    assert response.content.startswith(b"%PDF-")


@pytest.mark.parametrize("path", ["/api/exports/csv", "/api/exports/pdf"])
def test_export_empty_list(client, path):
    response = client.get(path)
    assert response.status_code == 400
    assert response.json()["detail"] == "Add some tubes before exporting."
