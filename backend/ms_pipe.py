"""
MS (mild steel) pipe chart: weight and price per full 6 m pipe.

Uses the mill-chart shorthand formulas rather than the cross-section engine:
    round:  (OD - t) * t * 0.02466          kg/m
    square: (4*side - 4*t) * t * 0.00785    kg/m
scaled by density / 7.85 for other materials.
"""

import math

from .errors import CalculationError
from .weights import DEFAULT_DENSITY

ROUND_CONSTANT = 0.02466
SQUARE_CONSTANT = 0.00785
PIPE_LENGTH_METERS = 6.0
TUBE_LENGTH_M_PER_INCH = 0.0254

# Inch label -> OD (mm)
ROUND_PIPE_SIZES = {
    '1/2"': 12.7,
    '5/8"': 15.87,
    '3/4"': 19.05,
    '7/8"': 22.05,
    '1"': 25.4,
    '1 1/4"': 31.75,
    '1 1/2"': 38.1,
    '2"': 50.8,
    '2 1/2"': 63.5,
    '3"': 76.2,
}

# Inch label -> side (mm)
SQUARE_PIPE_SIZES = {
    '1/2"': 12.7,
    '5/8"': 15.87,
    '3/4"': 19.05,
    '1"': 25.4,
    '1 1/4"': 31.75,
    '1 1/2"': 38.1,
    '2"': 50.8,
    '2 1/2"': 63.5,
    '3"': 76.2,
}

WALL_THICKNESSES = [1.0, 1.2, 1.5, 1.6, 1.8]

PIPE_SIZES = {"round": ROUND_PIPE_SIZES, "square": SQUARE_PIPE_SIZES}


def round_pipe_weight(od_mm: float, wall_mm: float, length_m: float = PIPE_LENGTH_METERS,
                      density: float = DEFAULT_DENSITY) -> float:
    weight_per_meter = (od_mm - wall_mm) * wall_mm * ROUND_CONSTANT * (density / DEFAULT_DENSITY)
    return weight_per_meter * length_m


def square_pipe_weight(side_mm: float, wall_mm: float, length_m: float = PIPE_LENGTH_METERS,
                       density: float = DEFAULT_DENSITY) -> float:
    weight_per_meter = ((side_mm * 4) - (wall_mm * 4)) * wall_mm * SQUARE_CONSTANT * (density / DEFAULT_DENSITY)
    return weight_per_meter * length_m


def pipe_weight(shape: str, size_mm: float, wall_mm: float, length_m: float = PIPE_LENGTH_METERS,
                density: float = DEFAULT_DENSITY) -> float:
    """
    Weight (kg) of one pipe of `length_m`.

    Raises CalculationError when the result is not a finite positive number;
    the shorthand formulas go negative once the wall reaches the OD.
    """
    if shape == "round":
        weight = round_pipe_weight(size_mm, wall_mm, length_m, density)
    elif shape == "square":
        weight = square_pipe_weight(size_mm, wall_mm, length_m, density)
    else:
        raise ValueError(f"MS pipe chart has no {shape!r} pipes")
    if not math.isfinite(weight) or weight <= 0:
        raise CalculationError("Unable to calculate weight with the given parameters.", value=weight)
    return weight


def pipe_length_meters(custom_length_inches: float = None) -> float:
    """Full 6 m pipe unless a custom length (inches) is given."""
    if custom_length_inches:
        return custom_length_inches * TUBE_LENGTH_M_PER_INCH
    return PIPE_LENGTH_METERS


def weight_for_size(shape: str, size_label: str, wall_mm: float, custom_length_inches: float = None,
                    density: float = DEFAULT_DENSITY) -> float:
    """
    Weight (kg) of one pipe picked by its inch label.
    Raises KeyError for a size label not in the chart.
    """
    size_mm = PIPE_SIZES[shape][size_label]
    return pipe_weight(shape, size_mm, wall_mm, pipe_length_meters(custom_length_inches), density)


def weight_chart(shape: str, density: float = DEFAULT_DENSITY) -> list:
    """One row per size: kg per 6 m pipe for each wall, 3 decimals."""
    rows = []
    for label, size_mm in PIPE_SIZES[shape].items():
        row = {"size_inch": label, "size_mm": size_mm, "weights": {}}
        for wt in WALL_THICKNESSES:
            row["weights"][str(wt)] = round(pipe_weight(shape, size_mm, wt, density=density), 3)
        rows.append(row)
    return rows


def price_chart(shape: str, price_per_kg: float, density: float = DEFAULT_DENSITY) -> list:
    """One row per size: price per 6 m pipe for each wall, 2 decimals."""
    rows = []
    for label, size_mm in PIPE_SIZES[shape].items():
        row = {"size_inch": label, "size_mm": size_mm, "prices": {}}
        for wt in WALL_THICKNESSES:
            weight = pipe_weight(shape, size_mm, wt, density=density)
            row["prices"][str(wt)] = round(weight * price_per_kg, 2)
        rows.append(row)
    return rows


def calculate_pipe(shape: str, size_label: str, wall_mm: float, price_per_kg: float,
                   quantity: int = 1, custom_length_inches: float = None,
                   density: float = DEFAULT_DENSITY) -> dict:
    """
    Weight and price for `quantity` pipes of one size.
    A custom length (inches) scales the 6 m weight linearly.
    Raises KeyError for a size label not in the chart, CalculationError for
    a wall the formulas can't handle.
    """
    weight = weight_for_size(shape, size_label, wall_mm, custom_length_inches, density)
    price = weight * price_per_kg
    return {
        "shape": shape,
        "size": size_label,
        "thickness": wall_mm,
        "weight_per_pipe": round(weight, 3),
        "price_per_pipe": round(price, 2),
        "quantity": quantity,
        "total_weight": round(weight * quantity, 3),
        "total_price": round(price * quantity, 2),
        "custom_length_inches": custom_length_inches,
    }
