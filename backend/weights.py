# Tube, pipe and sheet weight engine.
# Pure functions only: density and specs come in as arguments, kilograms go out.

import logging
import math

from .errors import CalculationError, InvalidMaterialError
from .standard_weights import standard_weight_per_20ft, per_20ft_to_per_meter

logger = logging.getLogger(__name__)

# Densities (g/cm³)
MATERIAL_DENSITIES = {
    "stainless-steel": 7.85,
    "carbon-steel": 7.85,
    "aluminum": 2.70,
    "copper": 8.96,
    "brass": 8.50,
    "titanium": 4.51,
}

DEFAULT_MATERIAL = "stainless-steel"
DEFAULT_DENSITY = MATERIAL_DENSITIES[DEFAULT_MATERIAL]

MM_PER_INCH = 25.4
# Tube lengths: inches -> meters
TUBE_LENGTH_M_PER_INCH = 0.0254
# Sheet width/length: inches -> meters. Inherited value, deliberately not 0.0254;
# changing it would change every stored sheet weight.
SHEET_M_PER_INCH = 0.0265
MM2_PER_M2 = 1_000_000
# g/cm³ -> kg/m³
DENSITY_SCALE = 1000

TUBE_SHAPES = ("round", "square", "rectangular")
SHAPES = TUBE_SHAPES + ("sheet",)


def build_density_table(custom_materials=None) -> dict:
    """
    Merge built-in densities with user-defined materials.

    custom_materials: iterable of {"name": str, "density": float} dicts or
    objects with name/density attributes. Customs override built-ins by name.
    """
    table = dict(MATERIAL_DENSITIES)
    for mat in custom_materials or []:
        name = mat["name"] if isinstance(mat, dict) else mat.name
        density = mat["density"] if isinstance(mat, dict) else mat.density
        if not name or density is None or not math.isfinite(density) or density <= 0:
            raise InvalidMaterialError(name, density)
        table[name] = float(density)
    return table


def resolve_density(material_id: str, density_table: dict = None) -> float:
    """
    Density (g/cm³) for a material id.
    Unknown materials fall back to stainless steel (7.85) instead of failing.
    """
    table = MATERIAL_DENSITIES if density_table is None else density_table
    density = table.get(material_id)
    if density is None:
        logger.debug("Unknown material %r, using default density %s", material_id, DEFAULT_DENSITY)
        return DEFAULT_DENSITY
    return density


def _weight_per_meter(area_mm2: float, density: float) -> float:
    """kg/m from a cross-section in mm² and a density in g/cm³."""
    return (area_mm2 / MM2_PER_M2) * density * DENSITY_SCALE


def _round_area_mm2(size_in: float, thickness_mm: float) -> float:
    od = size_in * MM_PER_INCH
    id_ = od - 2 * thickness_mm
    if id_ <= 0:
        return 0.0
    return math.pi * ((od / 2) ** 2 - (id_ / 2) ** 2)


def _square_area_mm2(size_in: float, thickness_mm: float) -> float:
    side = size_in * MM_PER_INCH
    inner_side = side - 2 * thickness_mm
    if inner_side <= 0:
        return 0.0
    return side ** 2 - inner_side ** 2


def _rectangular_area_mm2(width_in: float, height_in: float, thickness_mm: float) -> float:
    width = width_in * MM_PER_INCH
    height = height_in * MM_PER_INCH
    inner_width = width - 2 * thickness_mm
    inner_height = height - 2 * thickness_mm
    if inner_width <= 0 or inner_height <= 0:
        return 0.0
    return width * height - inner_width * inner_height


def _catalog_weight(spec) -> float:
    """Catalog weight for the item's length, or None when not a catalog size."""
    per_20ft = standard_weight_per_20ft(spec.shape, spec.size, spec.thickness)
    if per_20ft is None:
        return None
    return per_20ft_to_per_meter(per_20ft) * (spec.length * TUBE_LENGTH_M_PER_INCH)


def _sheet_weight(spec, density: float) -> float:
    width_m = spec.width * SHEET_M_PER_INCH
    length_m = spec.length * SHEET_M_PER_INCH
    thickness_m = spec.thickness / 1000
    volume_m3 = width_m * length_m * thickness_m
    return volume_m3 * density * DENSITY_SCALE


def compute_weight(spec, density: float) -> float:
    """
    Weight in kg of one tube or sheet.

    Round and square tubes use the standard weight catalog when the
    (size, thickness) pair is listed. The catalog encodes its own reference
    density, so `density` is NOT applied on that path.
    Everything else is cross-section area x length x density.

    Raises CalculationError when the result is not a finite positive number
    (e.g. a wall at least half the outer dimension).
    """
    shape = spec.shape

    if shape == "sheet":
        weight = _sheet_weight(spec, density)
    elif shape in ("round", "square"):
        weight = _catalog_weight(spec)
        if weight is None:
            if shape == "round":
                area = _round_area_mm2(spec.size, spec.thickness)
            else:
                area = _square_area_mm2(spec.size, spec.thickness)
            weight = _weight_per_meter(area, density) * (spec.length * TUBE_LENGTH_M_PER_INCH)
    elif shape == "rectangular":
        area = _rectangular_area_mm2(spec.width, spec.height, spec.thickness)
        weight = _weight_per_meter(area, density) * (spec.length * TUBE_LENGTH_M_PER_INCH)
    else:
        raise CalculationError(f"Unsupported shape: {shape!r}")

    if not math.isfinite(weight) or weight <= 0:
        raise CalculationError(
            "Unable to calculate weight with the given parameters.", value=weight
        )
    return weight


def compute_weight_for_material(spec, material_id: str, density_table: dict = None) -> float:
    """resolve_density + compute_weight in one call."""
    return compute_weight(spec, resolve_density(material_id, density_table))


def _fmt_inches(value) -> str:
    """1.0 -> '1', 1.25 -> '1.25'"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:g}"


def describe(item) -> str:
    """Human-readable size label, e.g. '2" × 1"' or '1.5"'."""
    if item.shape == "rectangular":
        return f'{_fmt_inches(item.width)}" × {_fmt_inches(item.height)}"'
    if item.shape == "sheet":
        return f'{_fmt_inches(item.width)}" × {_fmt_inches(item.length)}"'
    return f'{_fmt_inches(item.size)}"'


def is_standard_catalog_match(item) -> bool:
    """True when a round/square item's weight comes from the catalog."""
    if item.shape not in ("round", "square"):
        return False
    return standard_weight_per_20ft(item.shape, item.size, item.thickness) is not None
