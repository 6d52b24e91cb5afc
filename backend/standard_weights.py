"""
Standard pipe weight catalog.

Mild-steel round and square pipe weights per 20 ft stick, kg, keyed by nominal
size (inches) and wall thickness (mm). Values follow the MS pipe mill charts
(7.85 g/cm³ reference density), rounded to 2 decimals.

Catalog hits override the geometric formula in backend.weights.
"""

FEET_PER_STICK = 20
METERS_PER_FOOT = 0.3048

# shape -> size (in) -> wall (mm) -> kg per 20 ft
STANDARD_WEIGHTS = {
    "round": {
        0.5: {1.5: 2.53, 2.0: 3.22, 3.0: 4.37},
        0.75: {1.5: 3.96, 2.0: 5.13, 3.0: 7.24},
        1.0: {1.5: 5.39, 2.0: 7.04, 3.0: 10.10},
        1.25: {1.5: 6.82, 2.0: 8.94, 3.0: 12.97},
        1.5: {1.5: 8.25, 2.0: 10.85, 3.0: 15.83},
        2.0: {1.5: 11.12, 2.0: 14.67, 3.0: 21.56},
        2.5: {1.5: 13.98, 2.0: 18.49, 3.0: 27.28},
        3.0: {1.5: 16.84, 2.0: 22.31, 3.0: 33.01},
    },
    "square": {
        0.5: {1.5: 3.22, 2.0: 4.10, 3.0: 5.57},
        0.75: {1.5: 5.04, 2.0: 6.53, 3.0: 9.22},
        1.0: {1.5: 6.86, 2.0: 8.96, 3.0: 12.86},
        1.25: {1.5: 8.69, 2.0: 11.39, 3.0: 16.51},
        1.5: {1.5: 10.51, 2.0: 13.82, 3.0: 20.16},
        2.0: {1.5: 14.16, 2.0: 18.68, 3.0: 27.45},
        2.5: {1.5: 17.80, 2.0: 23.54, 3.0: 34.74},
        3.0: {1.5: 21.45, 2.0: 28.41, 3.0: 42.03},
    },
}


def _key(value) -> float:
    """'2.0', 2 and 2.0 all map to the 2.0 entry. No rounding: 1.0004 is not 1.0."""
    return float(value)


def standard_weight_per_20ft(shape: str, size, thickness):
    """
    Catalog weight (kg per 20 ft) for an exact (size, thickness) match.
    Returns None for any other shape or for sizes not in the catalog.
    """
    sizes = STANDARD_WEIGHTS.get(shape)
    if not sizes:
        return None
    try:
        walls = sizes.get(_key(size))
        if walls is None:
            return None
        return walls.get(_key(thickness))
    except (TypeError, ValueError):
        return None


def per_20ft_to_per_meter(weight_per_20ft: float) -> float:
    """kg per 20 ft stick -> kg per meter."""
    return weight_per_20ft / (FEET_PER_STICK * METERS_PER_FOOT)


def catalog_entries(shape: str) -> list:
    """Flat list of {size, thickness, weight_per_20ft} rows for a shape."""
    rows = []
    for size, walls in STANDARD_WEIGHTS.get(shape, {}).items():
        for thickness, weight in walls.items():
            rows.append({"size": size, "thickness": thickness, "weight_per_20ft": weight})
    return rows
