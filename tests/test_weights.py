"""
Weight engine tests: densities, catalog lookup, cross-section formulas.

No database, no API: backend.weights is pure functions.
"""

import math
from types import SimpleNamespace

import pytest

from backend.errors import CalculationError, InvalidMaterialError
from backend.schemas import RectangularSpec, RoundSpec, SheetSpec, SquareSpec
from backend.standard_weights import STANDARD_WEIGHTS, per_20ft_to_per_meter, standard_weight_per_20ft
from backend.weights import (
    MATERIAL_DENSITIES,
    build_density_table,
    compute_weight,
    compute_weight_for_material,
    describe,
    is_standard_catalog_match,
    resolve_density,
)


def _round_formula(size, thickness, length, density):
    od = size * 25.4
    id_ = od - 2 * thickness
    area = math.pi * ((od / 2) ** 2 - (id_ / 2) ** 2) / 1e6
    return area * density * 1000 * length * 0.0254


# ============================================================
# Densities
# ============================================================

def test_builtin_densities():
    assert MATERIAL_DENSITIES == {
        "stainless-steel": 7.85,
        "carbon-steel": 7.85,
        "aluminum": 2.70,
        "copper": 8.96,
        "brass": 8.50,
        "titanium": 4.51,
    }


def test_resolve_density_known_material():
    assert resolve_density("aluminum", MATERIAL_DENSITIES) == 2.7


def test_resolve_density_unknown_material_falls_back_to_stainless():
    assert resolve_density("unknown-material", MATERIAL_DENSITIES) == 7.85


def test_resolve_density_uses_custom_materials():
    table = build_density_table([{"name": "zinc", "density": 7.14}])
    assert resolve_density("zinc", table) == 7.14
    assert resolve_density("copper", table) == 8.96


def test_custom_material_overrides_builtin():
    table = build_density_table([SimpleNamespace(name="aluminum", density=2.81)])
    assert resolve_density("aluminum", table) == 2.81


@pytest.mark.parametrize("density", [0, -1.0, float("nan")])
def test_custom_material_rejects_bad_density(density):
    with pytest.raises(InvalidMaterialError):
        build_density_table([{"name": "mystery", "density": density}])


# ============================================================
# Formula path
# ============================================================

def test_round_tube_matches_annulus_formula():
    spec = RoundSpec(size=1.0, thickness=1.2, length=100)
    weight = compute_weight(spec, 7.85)
    assert math.isclose(weight, _round_formula(1.0, 1.2, 100, 7.85), rel_tol=1e-9)
    # 91.23 mm² x 7850 kg/m³ x 2.54 m
    assert weight == pytest.approx(1.82, abs=0.01)


@pytest.mark.parametrize("size,thickness,length", [
    (0.5, 1.0, 12),
    (1.0, 1.2, 100),
    (4.0, 1.2, 500),
    (12.0, 3.0, 10000),
])
def test_round_tube_formula_for_non_catalog_sizes(size, thickness, length):
    spec = RoundSpec(size=size, thickness=thickness, length=length)
    assert not is_standard_catalog_match(spec)
    assert math.isclose(compute_weight(spec, 8.96), _round_formula(size, thickness, length, 8.96), rel_tol=1e-9)


def test_square_tube_matches_hollow_square_formula():
    spec = SquareSpec(size=1.0, thickness=1.2, length=100)
    side = 25.4
    inner = side - 2 * 1.2
    expected = (side ** 2 - inner ** 2) / 1e6 * 7.85 * 1000 * 100 * 0.0254
    assert math.isclose(compute_weight(spec, 7.85), expected, rel_tol=1e-9)
    assert expected == pytest.approx(2.316, abs=0.001)


def test_rectangular_tube_formula():
    spec = RectangularSpec(width=2.0, height=1.0, thickness=1.5, length=120)
    w, h = 50.8, 25.4
    expected = (w * h - (w - 3.0) * (h - 3.0)) / 1e6 * 7.85 * 1000 * 120 * 0.0254
    assert math.isclose(compute_weight(spec, 7.85), expected, rel_tol=1e-9)
    assert expected == pytest.approx(5.254, abs=0.001)


def test_rectangular_never_uses_catalog():
    # 2" x 2" rectangular has the same section as a 2" square catalog pipe
    spec = RectangularSpec(width=2.0, height=2.0, thickness=2.0, length=240)
    assert not is_standard_catalog_match(spec)
    assert compute_weight(spec, 2.7) < compute_weight(spec, 7.85)


def test_sheet_weight_uses_sheet_conversion_constant():
    spec = SheetSpec(width=24, length=96, thickness=2.0)
    weight = compute_weight(spec, 7.85)
    expected = (24 * 0.0265) * (96 * 0.0265) * 0.002 * 7.85 * 1000
    assert math.isclose(weight, expected, rel_tol=1e-9)
    assert weight == pytest.approx(25.40, abs=0.01)


def test_sheet_weight_scales_with_density():
    spec = SheetSpec(width=48, length=96, thickness=3.0)
    assert math.isclose(compute_weight(spec, 2.7) / compute_weight(spec, 7.85), 2.7 / 7.85, rel_tol=1e-9)


# ============================================================
# Catalog path
# ============================================================

def test_catalog_lookup_hits_and_misses():
    assert standard_weight_per_20ft("round", 2.0, 2.0) == 14.67
    assert standard_weight_per_20ft("round", "2.0", "2.0") == 14.67
    assert standard_weight_per_20ft("square", 1, 1.5) == 6.86
    assert standard_weight_per_20ft("round", 1.0, 1.2) is None
    assert standard_weight_per_20ft("round", 17.0, 2.0) is None
    assert standard_weight_per_20ft("rectangular", 2.0, 2.0) is None


@pytest.mark.parametrize("size,thickness", [
    (1.0004, 2.0),
    (0.9996, 2.0),
    (2.0, 2.0001),
    (1.0001, 1.5),
])
def test_near_catalog_sizes_use_the_formula(size, thickness):
    spec = RoundSpec(size=size, thickness=thickness, length=240)
    assert standard_weight_per_20ft("round", size, thickness) is None
    assert not is_standard_catalog_match(spec)
    assert math.isclose(compute_weight(spec, 2.7), _round_formula(size, thickness, 240, 2.7), rel_tol=1e-9)


def test_catalog_override_ignores_density():
    spec = RoundSpec(size=2.0, thickness=2.0, length=100)
    expected = 14.67 / (20 * 0.3048) * 100 * 0.0254
    assert math.isclose(compute_weight(spec, 7.85), expected, rel_tol=1e-12)
    assert compute_weight(spec, 2.7) == compute_weight(spec, 7.85)


def test_catalog_weight_for_full_stick_equals_table_value():
    # 240" == 20 ft
    spec = SquareSpec(size=3.0, thickness=3.0, length=240)
    assert compute_weight(spec, 4.51) == pytest.approx(42.03, rel=1e-9)


def test_every_catalog_entry_is_used_for_its_shape():
    for shape, sizes in STANDARD_WEIGHTS.items():
        cls = RoundSpec if shape == "round" else SquareSpec
        for size, walls in sizes.items():
            for thickness, per_20ft in walls.items():
                spec = cls(size=size, thickness=thickness, length=50)
                assert is_standard_catalog_match(spec)
                expected = per_20ft_to_per_meter(per_20ft) * 50 * 0.0254
                assert math.isclose(compute_weight(spec, 1.0), expected, rel_tol=1e-12)


# ============================================================
# Invalid results
# ============================================================

@pytest.mark.parametrize("spec", [
    # wall exactly half the OD (0.1" = 2.54 mm)
    SimpleNamespace(shape="round", size=0.1, thickness=1.27, length=10),
    # wall thicker than half the OD
    SimpleNamespace(shape="round", size=0.1, thickness=1.5, length=10),
    SimpleNamespace(shape="round", size=1.0, thickness=20.0, length=10),
    SimpleNamespace(shape="square", size=0.1, thickness=3.0, length=10),
    SimpleNamespace(shape="rectangular", width=2.0, height=0.1, thickness=1.5, length=10),
])
def test_degenerate_walls_raise_calculation_error(spec):
    with pytest.raises(CalculationError):
        compute_weight(spec, 7.85)


def test_non_finite_result_raises():
    spec = SimpleNamespace(shape="sheet", width=24, length=float("inf"), thickness=2.0)
    with pytest.raises(CalculationError) as exc:
        compute_weight(spec, 7.85)
    assert exc.value.value == float("inf")


def test_zero_density_raises():
    with pytest.raises(CalculationError):
        compute_weight(RoundSpec(size=1.0, thickness=1.2, length=100), 0.0)


def test_unknown_shape_raises():
    with pytest.raises(CalculationError):
        compute_weight(SimpleNamespace(shape="hexagon", size=1.0, thickness=1.0, length=1.0), 7.85)


# ============================================================
# Purity, composition, labels
# ============================================================

def test_compute_weight_is_deterministic():
    spec = RectangularSpec(width=1.5, height=0.75, thickness=1.2, length=333.3)
    assert compute_weight(spec, 8.5) == compute_weight(spec, 8.5)


def test_compute_weight_for_material():
    spec = RoundSpec(size=1.0, thickness=1.2, length=100)
    assert compute_weight_for_material(spec, "copper") == compute_weight(spec, 8.96)
    assert compute_weight_for_material(spec, "no-such-metal") == compute_weight(spec, 7.85)


def test_describe_labels():
    assert describe(RectangularSpec(width=2, height=1, thickness=1.5, length=10)) == '2" × 1"'
    assert describe(SheetSpec(width=24, length=96, thickness=2.0)) == '24" × 96"'
    assert describe(RoundSpec(size=1.25, thickness=1.5, length=10)) == '1.25"'
    assert describe(SquareSpec(size=2.0, thickness=1.5, length=10)) == '2"'


def test_catalog_match_flag():
    assert is_standard_catalog_match(RoundSpec(size=2.0, thickness=2.0, length=10))
    assert is_standard_catalog_match(SquareSpec(size=0.75, thickness=3.0, length=10))
    assert not is_standard_catalog_match(RoundSpec(size=1.0, thickness=1.2, length=10))
    assert not is_standard_catalog_match(SheetSpec(width=24, length=24, thickness=2.0))
